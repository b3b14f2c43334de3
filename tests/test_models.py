"""Tests for data models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mailcraft.exceptions import (
    AttachmentNotFoundError,
    AttachmentReadError,
    EmptyAttachmentError,
    ErrorKind,
    InvalidAddressError,
)
from mailcraft.models import Attachment, EmailAddress, parse_address


class TestEmailAddress:
    def test_str_with_name(self) -> None:
        addr = EmailAddress(name="Jane", address="jane@example.com")
        assert str(addr) == "Jane <jane@example.com>"

    def test_str_without_name(self) -> None:
        addr = EmailAddress(address="jane@example.com")
        assert str(addr) == "jane@example.com"

    def test_header_value_encodes_non_ascii_name(self) -> None:
        addr = EmailAddress(name="Jürgen", address="j@example.com")
        value = addr.header_value()

        assert value.isascii()
        assert value.endswith("<j@example.com>")


class TestParseAddress:
    def test_bare_address(self) -> None:
        addr = parse_address("a@x.com")
        assert addr.address == "a@x.com"
        assert addr.name is None

    def test_display_name(self) -> None:
        addr = parse_address("Jane Doe <jane@example.com>")
        assert addr.name == "Jane Doe"
        assert addr.address == "jane@example.com"

    def test_quoted_display_name_with_comma(self) -> None:
        addr = parse_address('"Doe, Jane" <jane@example.com>')
        assert addr.name == "Doe, Jane"
        assert addr.address == "jane@example.com"

    def test_surrounding_whitespace(self) -> None:
        assert parse_address("  a@x.com  ").address == "a@x.com"

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "not-an-address",
            "@example.com",
            "jane@",
            "a@@x.com",
            "a..b@x.com",
            "a@x.com, b@y.com",
            "a@x.com <b@y.com>",
            "<a@x.com",
            "a@x.com junk",
            "Jane <jane@example.com> trailing",
            "Jane <jane@example.com>, Joe <joe@example.com>",
        ],
    )
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidAddressError) as exc_info:
            parse_address(raw)

        assert exc_info.value.kind is ErrorKind.INVALID_ADDRESS
        assert exc_info.value.address == raw


class TestAttachment:
    def test_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF-1.4")

        attachment = Attachment.from_path(str(path))

        assert attachment.name == "report.pdf"
        assert attachment.data == b"%PDF-1.4"
        assert attachment.content_type == "application/pdf"

    def test_from_path_empty(self) -> None:
        with pytest.raises(EmptyAttachmentError):
            Attachment.from_path("")

    def test_from_path_missing(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.pdf"

        with pytest.raises(AttachmentNotFoundError) as exc_info:
            Attachment.from_path(missing)

        assert exc_info.value.path == str(missing)
        assert exc_info.value.kind is ErrorKind.ATTACHMENT_NOT_FOUND

    def test_from_path_directory(self, tmp_path: Path) -> None:
        with pytest.raises(AttachmentReadError):
            Attachment.from_path(tmp_path)

    def test_from_bytes_classifies_by_name(self) -> None:
        attachment = Attachment.from_bytes("photo.png", b"\x89PNG")
        assert attachment.content_type == "image/png"

    def test_from_bytes_explicit_type(self) -> None:
        attachment = Attachment.from_bytes("data.bin", b"\x00", "application/x-custom")
        assert attachment.content_type == "application/x-custom"

    def test_immutable(self) -> None:
        attachment = Attachment.from_bytes("a.txt", b"x")

        with pytest.raises(ValidationError):
            attachment.name = "b.txt"  # type: ignore[misc]
