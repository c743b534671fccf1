"""Codec adapter base class.

An adapter wraps Pillow's decoder for one format and writes the decoded
RGBA samples into the World's arena, declaring the axis order it used.
Pillow is always opened restricted to the adapter's own format, so bytes
of another format are rejected instead of silently decoded.
"""

from __future__ import annotations

import io
import struct
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

import numpy as np
from PIL import Image

from getpixels.components.image import DecodedFrames
from getpixels.core.arena import TensorRef
from getpixels.core.world import World
from getpixels.encoding import EncodingTag
from getpixels.errors import DecodeError, ExhaustedFrameAllocationError, PixelsError

CHANNELS = 4

# Exceptions Pillow raises for malformed or truncated input
_PILLOW_ERRORS = (OSError, ValueError, SyntaxError, EOFError, IndexError, struct.error)


@contextmanager
def pillow_errors(label: str) -> Iterator[None]:
    """Translate Pillow failures inside the block into getpixels errors."""
    try:
        yield
    except PixelsError:
        raise
    except Image.DecompressionBombError as exc:
        raise ExhaustedFrameAllocationError(f"Error decoding {label}: {exc}") from exc
    except MemoryError as exc:
        raise ExhaustedFrameAllocationError(f"Out of memory decoding {label}") from exc
    except _PILLOW_ERRORS as exc:
        raise DecodeError(f"Error decoding {label}: {exc}") from exc


class CodecAdapter(ABC):
    """Base class for per-format decoders.

    Attributes:
        tag: Encoding handled by this adapter
        pillow_format: Pillow plugin name used to open the bytes
    """

    tag: EncodingTag
    pillow_format: str

    @property
    def label(self) -> str:
        return self.pillow_format.lower()

    def decode(self, data: bytes, world: World) -> DecodedFrames:
        """Decode ``data`` into the world's arena.

        Args:
            data: Encoded image bytes
            world: World whose arena receives the pixels

        Returns:
            DecodedFrames in this adapter's native layout

        Raises:
            DecodeError: If Pillow rejects the bytes
            ExhaustedFrameAllocationError: If the pixel buffer cannot be allocated
        """
        with pillow_errors(self.label):
            image = Image.open(io.BytesIO(data), formats=[self.pillow_format])
            with image:
                return self._decode_image(image, world)

    @abstractmethod
    def _decode_image(self, image: Image.Image, world: World) -> DecodedFrames:
        """Decode an opened Pillow image into the arena."""

    @staticmethod
    def _alloc_frame(world: World, width: int, height: int) -> TensorRef:
        """Provision the arena for one (H, W, 4) frame and allocate it."""
        world.provision_arena(height * width * CHANNELS)
        return world.arena.alloc_tensor((height, width, CHANNELS), np.uint8)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tag={self.tag.name})"
