"""Structured header block builder.

Values are validated when set and copied once, in a fixed order, onto an
:class:`email.message.EmailMessage`. Folding and RFC 2047 encoding of
non-ASCII values are left to the message's policy.
"""

import logging
import re
from email.message import EmailMessage

from mailcraft.exceptions import HeaderInjectionError

logger = logging.getLogger(__name__)

_HEADER_INJECTION_RE = re.compile(r"[\r\n\0]")

MESSAGE_HEADER_ORDER: tuple[str, ...] = (
    "From",
    "To",
    "Subject",
    "Message-ID",
    "Date",
    "MIME-Version",
    "Content-Type",
    "Content-Transfer-Encoding",
    "Cc",
    "Bcc",
)


def validate_header_value(name: str, value: str) -> None:
    """Validate a string is safe from header injection.

    Raises:
        HeaderInjectionError: If the value contains newline, carriage return, or null characters.
    """
    if _HEADER_INJECTION_RE.search(value):
        # Do not log the value, it may carry the injection payload
        logger.warning("Header injection attempt detected (header=%s)", name)
        raise HeaderInjectionError(name)


class HeaderBlock:
    """Ordered collection of header fields.

    Fields named in ``order`` are written first, in that order; any other
    field follows in insertion order. Setting a field twice replaces it.
    """

    def __init__(self, order: tuple[str, ...] = ()) -> None:
        self._order = order
        self._fields: dict[str, str] = {}

    def set(self, name: str, value: str) -> None:
        validate_header_value(name, value)
        self._fields[name] = value

    def get(self, name: str) -> str | None:
        return self._fields.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def names(self) -> list[str]:
        """Field names in serialization order."""
        ordered = [name for name in self._order if name in self._fields]
        ordered.extend(name for name in self._fields if name not in self._order)
        return ordered

    def apply_to(self, part: EmailMessage) -> None:
        """Write the fields onto ``part``, replacing any it already has."""
        for name in self.names():
            del part[name]
            part[name] = self._fields[name]
