"""SMTP transport for delivering composed messages using smtplib."""

import logging
import smtplib
from typing import Any

from mailcraft.exceptions import TransportError
from mailcraft.transport.base import BaseTransport
from mailcraft.transport.config import SMTPConfig

logger = logging.getLogger(__name__)


class SMTPTransport(BaseTransport):
    """Transport that sends messages via an authenticated SMTP session."""

    def __init__(self, config: SMTPConfig) -> None:
        """Initialize SMTP transport.

        Args:
            config: SMTP server configuration.
        """
        self.config = config
        self._connection: smtplib.SMTP | smtplib.SMTP_SSL | None = None

    @property
    def connected(self) -> bool:
        return self._connection is not None

    def connect(self) -> None:
        """Establish an authenticated connection to the SMTP server.

        Raises:
            ConfigurationError: If host, port, username or password is missing.
            TransportError: If the connection or login fails.
        """
        auth = self.config.plain_auth()
        host, port = self.config.address()

        kwargs: dict[str, Any] = {}
        if self.config.timeout is not None:
            kwargs["timeout"] = self.config.timeout

        logger.debug(
            "Connecting to SMTP server (host=%s, port=%s, ssl=%s)",
            host,
            port,
            self.config.ssl,
        )
        connection: smtplib.SMTP | smtplib.SMTP_SSL | None = None
        try:
            if self.config.ssl:
                connection = smtplib.SMTP_SSL(host, port, **kwargs)
            else:
                connection = smtplib.SMTP(host, port, **kwargs)
                connection.starttls()
            connection.login(auth.username, auth.password.get_secret_value())
        except (smtplib.SMTPException, OSError) as e:
            if connection is not None:
                connection.close()
            raise TransportError(f"smtp: {e}") from e

        self._connection = connection
        logger.info("SMTP connection established (host=%s)", host)

    def disconnect(self) -> None:
        """Close connection to SMTP server."""
        if self._connection:
            try:
                self._connection.quit()
            except (smtplib.SMTPException, OSError):
                logger.debug("SMTP quit failed (connection may already be closed)")
                self._connection.close()
            self._connection = None
            logger.info("SMTP connection closed")

    def deliver(self, envelope_from: str, envelope_to: list[str], data: bytes) -> None:
        """Send a composed message.

        Opens and closes a session around the call unless one is already
        open (e.g. when used as a context manager).

        Raises:
            ConfigurationError: If host, port, username or password is missing.
            TransportError: If the server rejects the message or any recipient,
                or the session fails. Refused recipients are in ``refused``.
        """
        if self._connection is None:
            with self:
                self._sendmail(envelope_from, envelope_to, data)
        else:
            self._sendmail(envelope_from, envelope_to, data)

    def _sendmail(self, envelope_from: str, envelope_to: list[str], data: bytes) -> None:
        if self._connection is None:
            raise TransportError("smtp: not connected")
        try:
            refused = self._connection.sendmail(envelope_from, envelope_to, data)
        except smtplib.SMTPRecipientsRefused as e:
            raise TransportError(f"smtp: {e}", refused=e.recipients) from e
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(f"smtp: {e}") from e

        if refused:
            for recipient, (code, reply) in refused.items():
                logger.warning(
                    "Recipient refused (recipient=%s, code=%s, reply=%r)", recipient, code, reply
                )
            raise TransportError(
                f"smtp: {len(refused)} of {len(envelope_to)} recipients refused: "
                + ", ".join(refused),
                refused=refused,
            )
        logger.info("Message delivered (recipients=%d)", len(envelope_to))
