"""BMP adapter.

BMP rows are stored bottom-up on disk; Pillow flips them while decoding,
and numpy packs the result into a freshly allocated (H, W, 4) buffer.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from getpixels.codecs.base import CodecAdapter
from getpixels.components.image import DecodedFrames
from getpixels.core.world import World
from getpixels.encoding import EncodingTag


class BMPDecoder(CodecAdapter):
    """Single-frame BMP decoder (1/4/8-bit palette, 16/24/32-bit)."""

    tag = EncodingTag.BMP
    pillow_format = "BMP"

    def _decode_image(self, image: Image.Image, world: World) -> DecodedFrames:
        width, height = image.size
        ref = self._alloc_frame(world, width, height)
        np.copyto(world.arena.view(ref), np.asarray(image.convert("RGBA"), dtype=np.uint8))
        return DecodedFrames(pix=ref, layout="HWC")
