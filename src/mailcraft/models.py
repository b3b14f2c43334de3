"""Data models for mailcraft."""

import re
from email.errors import ObsoleteHeaderDefect
from email.headerregistry import HeaderRegistry
from email.utils import formataddr
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from mailcraft.exceptions import (
    AttachmentNotFoundError,
    AttachmentReadError,
    EmptyAttachmentError,
    InvalidAddressError,
)
from mailcraft.mime_types import classify

# local-part@domain with no whitespace, brackets or extra "@"
_ADDR_SPEC_RE = re.compile(r"^[^\s@<>()\[\],;:\"]+@[^\s@<>()\[\],;:\"]+$")

# One mailbox: a bare addr-spec, or a display name and one <addr-spec>.
# An unquoted name may not contain "@", "," or angle brackets.
_MAILBOX_RE = re.compile(
    r"""^\s*(?:
        (?P<bare>[^\s<>(),;:"\[\]]+)
        |
        (?P<name>(?:"(?:[^"\\]|\\.)*"|[^"<>@,;:\[\]\\])*?)
        \s*<(?P<angle>[^\s<>(),;:"\[\]]+)>
    )\s*$""",
    re.VERBOSE,
)

_header_registry = HeaderRegistry()


class EmailAddress(BaseModel):
    """Parsed email address with optional display name."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    address: str

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.address}>"
        return self.address

    def header_value(self) -> str:
        """Format for a header field, RFC 2047 encoding a non-ASCII name."""
        return formataddr((self.name or "", self.address))


def parse_address(raw: str) -> EmailAddress:
    """Parse a single RFC 5322 mailbox such as ``Jane <jane@example.com>``.

    The whole string must be one mailbox. Lists, trailing text and
    unbalanced brackets are rejected rather than trimmed.

    Raises:
        InvalidAddressError: If the string is not exactly one valid mailbox.
    """
    if not raw or not raw.strip():
        raise InvalidAddressError(raw, "no address")

    match = _MAILBOX_RE.match(raw)
    if match is None:
        raise InvalidAddressError(raw, "not a single mailbox")
    addr = match.group("bare") or match.group("angle")

    if not _ADDR_SPEC_RE.match(addr):
        raise InvalidAddressError(raw, "missing or malformed '@domain'")
    local, domain = addr.rsplit("@", 1)
    if local.startswith(".") or local.endswith(".") or ".." in local:
        raise InvalidAddressError(raw, "malformed local part")
    if domain.startswith(".") or domain.endswith(".") or ".." in domain:
        raise InvalidAddressError(raw, "malformed domain")

    header = _header_registry("To", raw.strip())
    if len(header.addresses) != 1 or header.groups[0].display_name is not None:
        raise InvalidAddressError(raw, "not a single mailbox")
    for defect in header.defects:
        if not isinstance(defect, ObsoleteHeaderDefect):
            raise InvalidAddressError(raw, str(defect))
    mailbox = header.addresses[0]
    if mailbox.addr_spec != addr:
        raise InvalidAddressError(raw, "not a single mailbox")

    return EmailAddress(name=mailbox.display_name or None, address=addr)


class Attachment(BaseModel):
    """File embedded in an outgoing message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    name: str
    data: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> "Attachment":
        """Read a file and classify it by extension.

        Raises:
            EmptyAttachmentError: If ``path`` is empty.
            AttachmentNotFoundError: If the file does not exist.
            AttachmentReadError: If the file exists but cannot be read.
        """
        if not path:
            raise EmptyAttachmentError()

        file_path = Path(path)
        try:
            with open(file_path, "rb") as f:
                data = f.read()
        except FileNotFoundError as e:
            raise AttachmentNotFoundError(str(path)) from e
        except OSError as e:
            raise AttachmentReadError(str(path), e.strerror or str(e)) from e

        return cls(name=file_path.name, data=data, content_type=classify(file_path.name))

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: str | None = None) -> "Attachment":
        """Wrap in-memory bytes, classifying by ``name`` when no type is given."""
        if not name:
            raise EmptyAttachmentError()
        return cls(name=name, data=data, content_type=content_type or classify(name))
