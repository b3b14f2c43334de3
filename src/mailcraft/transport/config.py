"""Transport configuration models."""

from typing import NamedTuple

from pydantic import BaseModel, Field, SecretStr

from mailcraft.exceptions import (
    EmptyHostError,
    EmptyPasswordError,
    EmptyPortError,
    EmptyUsernameError,
)


class PlainAuth(NamedTuple):
    """Credentials for SMTP AUTH PLAIN, checked and ready to use."""

    username: str
    password: SecretStr
    host: str


class SMTPConfig(BaseModel):
    """SMTP server configuration.

    Every field may be left empty at construction time. Required values are
    checked by :meth:`plain_auth` right before a session is opened.
    """

    host: str = ""
    port: int | None = Field(default=587, ge=1, le=65535)
    username: str = ""
    password: SecretStr = SecretStr("")
    ssl: bool = False  # False = use STARTTLS, True = use SSL
    timeout: float | None = Field(default=None, gt=0)

    def plain_auth(self) -> PlainAuth:
        """Build the authentication context.

        Raises:
            EmptyUsernameError: If no username is configured.
            EmptyPasswordError: If no password is configured.
            EmptyHostError: If no host is configured.
        """
        if not self.username:
            raise EmptyUsernameError()
        if not self.password.get_secret_value():
            raise EmptyPasswordError()
        if not self.host:
            raise EmptyHostError()
        return PlainAuth(self.username, self.password, self.host)

    def address(self) -> tuple[str, int]:
        """Return ``(host, port)``.

        Raises:
            EmptyHostError: If no host is configured.
            EmptyPortError: If no port is configured.
        """
        if not self.host:
            raise EmptyHostError()
        if not self.port:
            raise EmptyPortError()
        return self.host, self.port
