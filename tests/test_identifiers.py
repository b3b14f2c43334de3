"""Tests for Message-ID generation."""

import re
from unittest.mock import patch

import pytest

from mailcraft.exceptions import ErrorKind, IdentifierError
from mailcraft.identifiers import generate_message_id, generate_uuid

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


class TestGenerateUUID:
    def test_canonical_layout(self) -> None:
        assert UUID_RE.match(generate_uuid())

    def test_version_and_variant_bits(self) -> None:
        """Version nibble is 4 and the variant bits are 10 for every draw."""
        for _ in range(50):
            value = generate_uuid()
            groups = value.split("-")
            assert groups[2][0] == "4"
            assert int(groups[3][0], 16) & 0b1100 == 0b1000

    def test_forced_bits_on_fixed_input(self) -> None:
        with patch("mailcraft.identifiers.os.urandom", return_value=b"\xff" * 16):
            value = generate_uuid()

        assert value == "ffffffff-ffff-4fff-bfff-ffffffffffff"

    def test_zero_input(self) -> None:
        with patch("mailcraft.identifiers.os.urandom", return_value=b"\x00" * 16):
            value = generate_uuid()

        assert value == "00000000-0000-4000-8000-000000000000"

    def test_unique(self) -> None:
        assert generate_uuid() != generate_uuid()

    def test_random_source_failure_raises(self) -> None:
        with patch("mailcraft.identifiers.os.urandom", side_effect=OSError("no entropy")):
            with pytest.raises(IdentifierError) as exc_info:
                generate_uuid()

        assert exc_info.value.kind is ErrorKind.IDENTIFIER
        assert "no entropy" in str(exc_info.value)


class TestGenerateMessageID:
    def test_format_with_explicit_hostname(self) -> None:
        message_id = generate_message_id("mail.example.com")

        assert message_id.startswith("<")
        assert message_id.endswith("@mail.example.com>")
        assert UUID_RE.match(message_id[1:].split("@")[0])

    def test_uses_local_hostname(self) -> None:
        with patch("mailcraft.identifiers.socket.gethostname", return_value="box"):
            message_id = generate_message_id()

        assert message_id.endswith("@box>")

    def test_hostname_lookup_failure_falls_back_to_localhost(self) -> None:
        with patch("mailcraft.identifiers.socket.gethostname", side_effect=OSError):
            message_id = generate_message_id()

        assert message_id.endswith("@localhost>")

    def test_empty_hostname_falls_back_to_localhost(self) -> None:
        with patch("mailcraft.identifiers.socket.gethostname", return_value=""):
            message_id = generate_message_id()

        assert message_id.endswith("@localhost>")

    def test_two_calls_differ(self) -> None:
        assert generate_message_id("h") != generate_message_id("h")

    def test_random_source_failure_propagates(self) -> None:
        """No degraded Message-ID is produced when randomness is unavailable."""
        with patch("mailcraft.identifiers.os.urandom", side_effect=NotImplementedError):
            with pytest.raises(IdentifierError):
                generate_message_id("h")
