"""Tests for attachment transfer encoding."""

import base64
import os

import pytest

from mailcraft.encoding import decode_attachment, encode_attachment, wrap_lines


class TestWrapLines:
    def test_short_input_unchanged(self) -> None:
        assert wrap_lines(b"abc") == b"abc"

    def test_exactly_76_has_no_break(self) -> None:
        data = b"a" * 76
        assert wrap_lines(data) == data

    def test_77_breaks_once(self) -> None:
        assert wrap_lines(b"a" * 77) == b"a" * 76 + b"\r\n" + b"a"

    def test_no_trailing_break(self) -> None:
        assert not wrap_lines(b"a" * 152).endswith(b"\r\n")
        assert wrap_lines(b"a" * 152).count(b"\r\n") == 1

    def test_empty(self) -> None:
        assert wrap_lines(b"") == b""

    def test_custom_width(self) -> None:
        assert wrap_lines(b"abcdef", width=2) == b"ab\r\ncd\r\nef"

    def test_invalid_width(self) -> None:
        with pytest.raises(ValueError):
            wrap_lines(b"abc", width=0)

    @pytest.mark.parametrize("length", [1, 75, 76, 77, 500, 4096])
    def test_no_line_exceeds_76(self, length: int) -> None:
        wrapped = wrap_lines(b"x" * length)
        assert all(len(line) <= 76 for line in wrapped.split(b"\r\n"))


class TestEncodeAttachment:
    def test_matches_standard_base64(self) -> None:
        assert encode_attachment(b"hello") == b"aGVsbG8="

    def test_long_payload_is_wrapped(self) -> None:
        encoded = encode_attachment(bytes(range(256)) * 4)
        lines = encoded.split(b"\r\n")

        assert len(lines) > 1
        assert all(len(line) <= 76 for line in lines)
        assert all(len(line) == 76 for line in lines[:-1])

    def test_deterministic(self) -> None:
        data = os.urandom(300)
        assert encode_attachment(data) == encode_attachment(data)

    @pytest.mark.parametrize("size", [1, 2, 3, 57, 58, 1000])
    def test_round_trip(self, size: int) -> None:
        data = os.urandom(size)
        encoded = encode_attachment(data)

        assert decode_attachment(encoded) == data
        assert base64.b64decode(encoded.replace(b"\r\n", b"")) == data
