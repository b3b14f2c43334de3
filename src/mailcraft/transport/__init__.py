"""Message transports for mailcraft."""

from mailcraft.transport.base import BaseTransport
from mailcraft.transport.config import PlainAuth, SMTPConfig
from mailcraft.transport.smtp import SMTPTransport

__all__ = [
    "BaseTransport",
    "PlainAuth",
    "SMTPConfig",
    "SMTPTransport",
]
