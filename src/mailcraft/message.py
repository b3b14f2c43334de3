"""Message composer.

A :class:`Message` collects addresses, subject, body variants and attachments
through setters, then turns them into an RFC 5322 / MIME byte stream when it
is composed or sent.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from email.errors import MessageError
from email.message import EmailMessage
from email.policy import SMTP
from email.utils import format_datetime
from pathlib import Path
from typing import NamedTuple

from mailcraft.encoding import encode_attachment
from mailcraft.exceptions import EmptyFromError, EmptySubjectError, EmptyToError, MultipartError
from mailcraft.headers import MESSAGE_HEADER_ORDER, HeaderBlock
from mailcraft.identifiers import generate_message_id
from mailcraft.models import Attachment, EmailAddress, parse_address
from mailcraft.transport.base import BaseTransport
from mailcraft.transport.config import SMTPConfig
from mailcraft.transport.smtp import SMTPTransport

logger = logging.getLogger(__name__)

TEXT_PLAIN = "text/plain; charset=UTF-8"
TEXT_HTML = "text/html; charset=UTF-8"


def _join(addresses: list[EmailAddress]) -> str:
    return ", ".join(addr.header_value() for addr in addresses)


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _to_bytes(content: str | bytes) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content


def _as_payload(content: bytes) -> str:
    # surrogateescape keeps non-ASCII bytes intact through BytesGenerator (8bit)
    return content.decode("ascii", "surrogateescape")


class OutgoingMessage(NamedTuple):
    """A composed message and the envelope it should be delivered with."""

    envelope_from: str
    envelope_to: list[str]
    data: bytes


class Message:
    """An email under construction.

    Setters never validate; everything is checked when the message is
    composed. A message can be sent more than once and gets a fresh
    Message-ID and Date each time. Instances are not safe for concurrent use.
    """

    def __init__(
        self,
        options: SMTPConfig | None = None,
        *,
        include_bcc_header: bool = True,
        hostname: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize an empty message.

        Args:
            options: SMTP settings used by :meth:`send` when no transport is given.
            include_bcc_header: Write a ``Bcc`` header when Bcc recipients exist.
                Bcc recipients are delivered either way.
            hostname: Domain part of the Message-ID (default: local hostname).
            clock: Returns the time used for the ``Date`` header.
        """
        self.options = options or SMTPConfig()
        self.include_bcc_header = include_bcc_header
        self._hostname = hostname
        self._clock = clock or (lambda: datetime.now().astimezone())

        self._from = ""
        self._to: list[str] = []
        self._cc: list[str] = []
        self._bcc: list[str] = []
        self._subject = ""
        self._plain_text: bytes | None = None
        self._html: bytes | None = None
        self._attachments: list[Attachment] = []

    # setters

    def set_from(self, address: str) -> None:
        self._from = address

    def set_to(self, addresses: Iterable[str]) -> None:
        self._to = list(addresses)

    def set_cc(self, addresses: Iterable[str]) -> None:
        self._cc = list(addresses)

    def set_bcc(self, addresses: Iterable[str]) -> None:
        self._bcc = list(addresses)

    def set_subject(self, subject: str) -> None:
        self._subject = subject

    def set_body_plain_text(self, content: str | bytes) -> None:
        """Set the plain text body. ``str`` content is encoded as UTF-8."""
        self._plain_text = _to_bytes(content)

    def set_body_html(self, content: str | bytes) -> None:
        """Set the HTML body. ``str`` content is encoded as UTF-8."""
        self._html = _to_bytes(content)

    def add_attachment(self, path: str | Path) -> Attachment:
        """Read a file and append it as an attachment.

        Raises:
            EmptyAttachmentError: If ``path`` is empty.
            AttachmentNotFoundError: If the file does not exist.
            AttachmentReadError: If the file cannot be read.
        """
        attachment = Attachment.from_path(path)
        self._attachments.append(attachment)
        logger.debug(
            "Attachment added (name=%s, content_type=%s, size=%d)",
            attachment.name,
            attachment.content_type,
            len(attachment.data),
        )
        return attachment

    def add_attachment_data(
        self, name: str, data: bytes, content_type: str | None = None
    ) -> Attachment:
        """Append in-memory bytes as an attachment."""
        attachment = Attachment.from_bytes(name, data, content_type)
        self._attachments.append(attachment)
        return attachment

    # read access

    @property
    def from_address(self) -> str:
        return self._from

    @property
    def to(self) -> list[str]:
        return list(self._to)

    @property
    def cc(self) -> list[str]:
        return list(self._cc)

    @property
    def bcc(self) -> list[str]:
        return list(self._bcc)

    @property
    def subject(self) -> str:
        return self._subject

    @property
    def plain_text(self) -> bytes | None:
        return self._plain_text

    @property
    def html(self) -> bytes | None:
        return self._html

    @property
    def attachments(self) -> tuple[Attachment, ...]:
        return tuple(self._attachments)

    # composition

    def _validate(self) -> None:
        if not self._from:
            raise EmptyFromError()
        if not self._to:
            raise EmptyToError()
        if not self._subject:
            raise EmptySubjectError()

    def _text_part(self, content_type: str, content: bytes) -> EmailMessage:
        headers = HeaderBlock()
        headers.set("Content-Type", content_type)
        headers.set("Content-Transfer-Encoding", "8bit")
        part = EmailMessage(policy=SMTP)
        headers.apply_to(part)
        part.set_payload(_as_payload(content))
        return part

    def _text_parts(self) -> list[EmailMessage]:
        parts = []
        if self._plain_text is not None:
            parts.append(self._text_part(TEXT_PLAIN, self._plain_text))
        if self._html is not None:
            parts.append(self._text_part(TEXT_HTML, self._html))
        return parts

    def _attachment_part(self, attachment: Attachment) -> EmailMessage:
        name = _quote(attachment.name)
        headers = HeaderBlock()
        headers.set("Content-Type", f'{attachment.content_type}; name="{name}"')
        headers.set("Content-Transfer-Encoding", "base64")
        headers.set("Content-Disposition", f'attachment; filename="{name}"')
        part = EmailMessage(policy=SMTP)
        headers.apply_to(part)
        part.set_payload(encode_attachment(attachment.data).decode("ascii"))
        return part

    def _build_body(self) -> tuple[str, str | list[EmailMessage], bool]:
        """Build the body.

        Multipart content types carry no boundary here; the generator picks
        one that does not occur in any part when the message is serialized.

        Returns:
            ``(content_type, payload, single_part)``. ``payload`` is the raw
            text for single-part bodies, else the list of subparts.
        """
        plain_text = self._plain_text
        html = self._html

        if not self._attachments:
            if plain_text is not None and html is not None:
                return "multipart/alternative", self._text_parts(), False
            if html is not None:
                return TEXT_HTML, _as_payload(html), True
            if plain_text is None:
                logger.warning("Message has no body or attachments")
            return TEXT_PLAIN, _as_payload(plain_text or b""), True

        parts: list[EmailMessage] = []
        if plain_text is not None and html is not None:
            alternative = EmailMessage(policy=SMTP)
            alternative["Content-Type"] = "multipart/alternative"
            for part in self._text_parts():
                alternative.attach(part)
            parts.append(alternative)
        else:
            parts.extend(self._text_parts())

        parts.extend(self._attachment_part(attachment) for attachment in self._attachments)
        return "multipart/mixed", parts, False

    def _build_headers(
        self,
        sender: EmailAddress,
        to: list[EmailAddress],
        cc: list[EmailAddress],
        bcc: list[EmailAddress],
        content_type: str,
        single_part: bool,
    ) -> HeaderBlock:
        headers = HeaderBlock(MESSAGE_HEADER_ORDER)
        headers.set("From", sender.header_value())
        headers.set("To", _join(to))
        headers.set("Subject", self._subject)
        headers.set("Message-ID", generate_message_id(self._hostname))
        headers.set("Date", format_datetime(self._clock()))
        headers.set("MIME-Version", "1.0")
        headers.set("Content-Type", content_type)
        if single_part:
            headers.set("Content-Transfer-Encoding", "8bit")
        if cc:
            headers.set("Cc", _join(cc))
        if bcc and self.include_bcc_header:
            headers.set("Bcc", _join(bcc))
        return headers

    def build(self) -> OutgoingMessage:
        """Validate and compose the message without sending it.

        Raises:
            CompositionError: If a required field is empty, an address is
                malformed or a header value is unsafe.
            EncodingError: If the body or Message-ID cannot be produced.
        """
        self._validate()

        sender = parse_address(self._from)
        to = [parse_address(addr) for addr in self._to]
        cc = [parse_address(addr) for addr in self._cc]
        bcc = [parse_address(addr) for addr in self._bcc]

        msg = EmailMessage(policy=SMTP)
        try:
            content_type, payload, single_part = self._build_body()
            headers = self._build_headers(sender, to, cc, bcc, content_type, single_part)
            headers.apply_to(msg)
            if isinstance(payload, list):
                for part in payload:
                    msg.attach(part)
            else:
                msg.set_payload(payload)
            data = msg.as_bytes()
        except (MessageError, TypeError, ValueError) as e:
            raise MultipartError(f"multipart: {e}") from e

        envelope_to = list(dict.fromkeys(r.address for r in [*to, *cc, *bcc]))
        logger.debug(
            "Message composed (content_type=%s, attachments=%d, size=%d)",
            content_type.split(";", 1)[0],
            len(self._attachments),
            len(data),
        )
        return OutgoingMessage(sender.address, envelope_to, data)

    def compose(self) -> bytes:
        """Return the full message (headers, blank line, body) as bytes."""
        return self.build().data

    def send(self, transport: BaseTransport | None = None) -> OutgoingMessage:
        """Compose the message and deliver it.

        Args:
            transport: Where to deliver. Defaults to an SMTP session built from
                :attr:`options`.

        Returns:
            The message as it was handed to the transport.

        Raises:
            MailcraftError: On any composition, configuration or transport error.
                Nothing is transmitted unless composition succeeds.
        """
        outgoing = self.build()
        transport = transport or SMTPTransport(self.options)
        transport.deliver(outgoing.envelope_from, outgoing.envelope_to, outgoing.data)
        logger.info(
            "Email sent (recipients=%d, subject=%r)", len(outgoing.envelope_to), self._subject
        )
        return outgoing
