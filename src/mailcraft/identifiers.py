"""Message-ID generation.

A Message-ID is ``<uuid@hostname>`` (RFC 5322 section 3.6.4), where the uuid
is a random version 4 UUID as described in RFC 4122.
"""

import logging
import os
import socket

from mailcraft.exceptions import IdentifierError

logger = logging.getLogger(__name__)

FALLBACK_HOSTNAME = "localhost"


def generate_uuid() -> str:
    """Generate a random RFC 4122 version 4 UUID.

    Returns:
        The UUID in canonical 8-4-4-4-12 lowercase hex form.

    Raises:
        IdentifierError: If the OS random source is unavailable.
    """
    try:
        raw = bytearray(os.urandom(16))
    except (OSError, NotImplementedError) as e:
        raise IdentifierError(f"random source unavailable: {e}") from e

    # version 4 (pseudo-random); see RFC 4122 section 4.4
    raw[6] = (raw[6] & 0x0F) | 0x40
    # variant 10xx; see RFC 4122 section 4.1.1
    raw[8] = (raw[8] & 0x3F) | 0x80

    hexed = raw.hex()
    return f"{hexed[0:8]}-{hexed[8:12]}-{hexed[12:16]}-{hexed[16:20]}-{hexed[20:32]}"


def _local_hostname() -> str:
    try:
        hostname = socket.gethostname()
    except OSError:
        logger.debug("Hostname lookup failed, using %s", FALLBACK_HOSTNAME)
        return FALLBACK_HOSTNAME
    return hostname or FALLBACK_HOSTNAME


def generate_message_id(hostname: str | None = None) -> str:
    """Build a Message-ID header value.

    Args:
        hostname: Domain part to use. Defaults to the local hostname, or
            ``localhost`` when it cannot be determined.

    Raises:
        IdentifierError: If no UUID can be generated. No degraded ID is returned.
    """
    try:
        uuid = generate_uuid()
    except IdentifierError:
        logger.error("Message-ID generation failed")
        raise
    return f"<{uuid}@{hostname or _local_hostname()}>"
