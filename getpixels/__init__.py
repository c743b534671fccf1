"""Load PNG, JPEG, GIF and BMP images as uniform RGBA numpy arrays.

Sources may be raw bytes, "data:" URIs, http(s) URLs or local paths. The
encoding is detected from the content, decoded with Pillow, and returned
as a C-contiguous uint8 array shaped (H, W, 4), or (F, H, W, 4) for
animated GIFs.

Quick Start:
    >>> from getpixels import get_pixels_sync
    >>> result = get_pixels_sync("photo.png")
    >>> result.pixels.shape
    (480, 640, 4)

Inside an event loop:
    >>> from getpixels import get_pixels
    >>> result = await get_pixels("https://example.com/anim.gif")
    >>> result.pixels.shape, len(result.frames)
    ((12, 100, 100, 4), 12)
"""

import logging

__version__ = "0.1.0"

from getpixels.api import PixelResult, get_pixels, get_pixels_callback, get_pixels_sync
from getpixels.components.image import FrameMetadata
from getpixels.config import Settings, load_settings
from getpixels.encoding import EncodingTag
from getpixels.errors import (
    DecodeError,
    ExhaustedFrameAllocationError,
    FetchError,
    MalformedDataURIError,
    PixelsError,
    ReadError,
    UnsupportedTypeError,
)
from getpixels.sniff import sniff

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "DecodeError",
    "EncodingTag",
    "ExhaustedFrameAllocationError",
    "FetchError",
    "FrameMetadata",
    "MalformedDataURIError",
    "PixelResult",
    "PixelsError",
    "ReadError",
    "Settings",
    "UnsupportedTypeError",
    "get_pixels",
    "get_pixels_callback",
    "get_pixels_sync",
    "load_settings",
    "sniff",
]
