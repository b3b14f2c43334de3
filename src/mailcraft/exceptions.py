"""Custom exceptions for mailcraft.

Every error raised by the library derives from :class:`MailcraftError` and
carries a ``kind`` drawn from :class:`ErrorKind`, so callers can branch on a
closed set of values instead of matching message strings.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed enumeration of everything that can go wrong while sending."""

    # configuration
    EMPTY_HOST = "empty_host"
    EMPTY_PORT = "empty_port"
    EMPTY_USERNAME = "empty_username"
    EMPTY_PASSWORD = "empty_password"

    # composition
    EMPTY_FROM = "empty_from"
    EMPTY_TO = "empty_to"
    EMPTY_SUBJECT = "empty_subject"
    INVALID_ADDRESS = "invalid_address"
    EMPTY_ATTACHMENT = "empty_attachment"
    ATTACHMENT_NOT_FOUND = "attachment_not_found"
    ATTACHMENT_READ = "attachment_read"
    HEADER_INJECTION = "header_injection"

    # encoding
    MULTIPART = "multipart"
    IDENTIFIER = "identifier"

    # transport
    TRANSPORT = "transport"


class MailcraftError(Exception):
    """Base exception for mailcraft."""

    kind: ErrorKind


class ConfigurationError(MailcraftError):
    """Raised when SMTP options are missing at authentication time."""


class EmptyHostError(ConfigurationError):
    kind = ErrorKind.EMPTY_HOST

    def __init__(self) -> None:
        super().__init__("mail options: host is empty")


class EmptyPortError(ConfigurationError):
    kind = ErrorKind.EMPTY_PORT

    def __init__(self) -> None:
        super().__init__("mail options: port is empty")


class EmptyUsernameError(ConfigurationError):
    kind = ErrorKind.EMPTY_USERNAME

    def __init__(self) -> None:
        super().__init__("mail options: username is empty")


class EmptyPasswordError(ConfigurationError):
    kind = ErrorKind.EMPTY_PASSWORD

    def __init__(self) -> None:
        super().__init__("mail options: password is empty")


class CompositionError(MailcraftError):
    """Raised when a message cannot be assembled from its inputs."""


class EmptyFromError(CompositionError):
    kind = ErrorKind.EMPTY_FROM

    def __init__(self) -> None:
        super().__init__("message: from is empty")


class EmptyToError(CompositionError):
    kind = ErrorKind.EMPTY_TO

    def __init__(self) -> None:
        super().__init__("message: to is empty")


class EmptySubjectError(CompositionError):
    kind = ErrorKind.EMPTY_SUBJECT

    def __init__(self) -> None:
        super().__init__("message: subject is empty")


class InvalidAddressError(CompositionError):
    """Raised when an address cannot be parsed as an RFC 5322 mailbox."""

    kind = ErrorKind.INVALID_ADDRESS

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"mail: invalid address {address!r}: {reason}")


class EmptyAttachmentError(CompositionError):
    kind = ErrorKind.EMPTY_ATTACHMENT

    def __init__(self) -> None:
        super().__init__("message: attachment is empty")


class AttachmentNotFoundError(CompositionError):
    kind = ErrorKind.ATTACHMENT_NOT_FOUND

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"attachment: file not found: {path}")


class AttachmentReadError(CompositionError):
    kind = ErrorKind.ATTACHMENT_READ

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"attachment: cannot read {path}: {reason}")


class HeaderInjectionError(CompositionError):
    """Raised when a header value contains CR, LF or NUL."""

    kind = ErrorKind.HEADER_INJECTION

    def __init__(self, header: str) -> None:
        self.header = header
        super().__init__(
            f"header {header}: value contains invalid characters "
            "(newline, carriage return, or null)"
        )


class EncodingError(MailcraftError):
    """Raised when the body or identifiers cannot be produced."""


class MultipartError(EncodingError):
    """Raised when the MIME tree cannot be serialized."""

    kind = ErrorKind.MULTIPART


class IdentifierError(EncodingError):
    kind = ErrorKind.IDENTIFIER


class TransportError(MailcraftError):
    """Raised when the SMTP session fails or a recipient is refused.

    The original error, if any, is chained. ``refused`` maps each refused
    recipient to the server's ``(code, reply)``.
    """

    kind = ErrorKind.TRANSPORT

    def __init__(
        self, message: str, refused: dict[str, tuple[int, bytes]] | None = None
    ) -> None:
        self.refused = refused or {}
        super().__init__(message)
