"""Encoding to codec adapter dispatch."""

from __future__ import annotations

from getpixels.codecs.base import CodecAdapter
from getpixels.codecs.bmp import BMPDecoder
from getpixels.codecs.gif import GIFDecoder
from getpixels.codecs.jpeg import JPEGDecoder
from getpixels.codecs.png import PNGDecoder
from getpixels.components.image import DecodedFrames
from getpixels.core.world import World
from getpixels.encoding import EncodingTag
from getpixels.errors import UnsupportedTypeError

ADAPTERS: dict[EncodingTag, CodecAdapter] = {
    EncodingTag.PNG: PNGDecoder(),
    EncodingTag.JPEG: JPEGDecoder(),
    EncodingTag.GIF: GIFDecoder(),
    EncodingTag.BMP: BMPDecoder(),
}


def dispatch(encoding: EncodingTag | str | None) -> CodecAdapter:
    """Select the adapter for ``encoding``.

    Args:
        encoding: EncodingTag or MIME type string

    Returns:
        The matching CodecAdapter

    Raises:
        UnsupportedTypeError: If no adapter handles the encoding
    """
    if isinstance(encoding, EncodingTag):
        return ADAPTERS[encoding]
    if isinstance(encoding, str):
        return ADAPTERS[EncodingTag.from_mime(encoding)]
    raise UnsupportedTypeError(f"Unsupported file type: {encoding!r}", value=None)


def decode(encoding: EncodingTag | str, data: bytes, world: World) -> DecodedFrames:
    """Decode ``data`` with the adapter for ``encoding``."""
    return dispatch(encoding).decode(data, world)
