"""Signature sniffing: guess the encoding from the first bytes.

This is a minimal check on a two-byte prefix. It separates the four
supported formats from each other but will call any buffer that starts
with FF D8 a JPEG, corrupt or not. Sniffing is always a fallback and
never raises.
"""

from __future__ import annotations

import logging
from typing import Any

from getpixels.encoding import EncodingTag

logger = logging.getLogger(__name__)

# Buffers shorter than this never match
MIN_SNIFF_BYTES = 5

# Checked in order, first match wins
SIGNATURES: tuple[tuple[bytes, EncodingTag], ...] = (
    (b"\x89\x50", EncodingTag.PNG),
    (b"\x47\x49", EncodingTag.GIF),
    (b"\x42\x4d", EncodingTag.BMP),
    (b"\xff\xd8", EncodingTag.JPEG),
)


def sniff(data: Any) -> EncodingTag | None:
    """Return the encoding whose magic prefix starts ``data``.

    Args:
        data: bytes-like object

    Returns:
        Matching EncodingTag, or None when nothing matches or ``data``
        cannot be read as bytes
    """
    try:
        view = memoryview(data).cast("B")
    except (TypeError, ValueError) as exc:
        logger.debug("Signature sniffing skipped: %s", exc)
        return None

    if view.nbytes < MIN_SNIFF_BYTES:
        return None

    head = bytes(view[:2])
    for prefix, tag in SIGNATURES:
        if head == prefix:
            return tag
    return None


def sniff_mime(data: Any) -> str | None:
    """Like sniff() but return the MIME type string."""
    tag = sniff(data)
    return tag.mime if tag is not None else None
