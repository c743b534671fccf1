from getpixels.codecs.base import CodecAdapter, pillow_errors
from getpixels.codecs.bmp import BMPDecoder
from getpixels.codecs.dispatch import ADAPTERS, decode, dispatch
from getpixels.codecs.gif import GIFDecoder, frame_metadata
from getpixels.codecs.jpeg import JPEGDecoder
from getpixels.codecs.png import PNGDecoder

__all__ = [
    "ADAPTERS",
    "BMPDecoder",
    "CodecAdapter",
    "GIFDecoder",
    "JPEGDecoder",
    "PNGDecoder",
    "decode",
    "dispatch",
    "frame_metadata",
    "pillow_errors",
]
