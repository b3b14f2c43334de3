"""Transfer encoding for attachment payloads (RFC 2045 section 6.8)."""

import base64

MAX_LINE_LENGTH = 76
CRLF = b"\r\n"


def wrap_lines(encoded: bytes, width: int = MAX_LINE_LENGTH) -> bytes:
    """Insert a CRLF after every ``width`` characters.

    The last chunk is not followed by a line break.
    """
    if width <= 0:
        raise ValueError("width must be positive")
    return CRLF.join(encoded[i : i + width] for i in range(0, len(encoded), width))


def encode_attachment(raw: bytes) -> bytes:
    """Base64-encode ``raw`` and wrap it to 76-column lines."""
    return wrap_lines(base64.b64encode(raw))


def decode_attachment(encoded: bytes) -> bytes:
    """Reverse :func:`encode_attachment`."""
    return base64.b64decode(encoded.replace(b"\r", b"").replace(b"\n", b""), validate=True)
