"""Compose RFC 5322 / MIME email messages and send them over SMTP."""

from mailcraft.config import ConfigError, Settings
from mailcraft.encoding import decode_attachment, encode_attachment, wrap_lines
from mailcraft.exceptions import ErrorKind, MailcraftError
from mailcraft.identifiers import generate_message_id, generate_uuid
from mailcraft.message import Message, OutgoingMessage
from mailcraft.mime_types import classify
from mailcraft.models import Attachment, EmailAddress, parse_address
from mailcraft.transport import BaseTransport, SMTPConfig, SMTPTransport

__version__ = "0.1.0"

__all__ = [
    "Attachment",
    "BaseTransport",
    "ConfigError",
    "EmailAddress",
    "ErrorKind",
    "MailcraftError",
    "Message",
    "OutgoingMessage",
    "SMTPConfig",
    "SMTPTransport",
    "Settings",
    "classify",
    "decode_attachment",
    "encode_attachment",
    "generate_message_id",
    "generate_uuid",
    "parse_address",
    "wrap_lines",
]
