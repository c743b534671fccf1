"""JPEG adapter.

Pillow decodes JPEG rows top to bottom, so the samples are already in
(H, W, C) order and no width/height swap is needed. JPEG carries no
alpha; colour goes to channels 0-2 and alpha is set opaque.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from getpixels.codecs.base import CodecAdapter
from getpixels.components.image import DecodedFrames
from getpixels.core.world import World
from getpixels.encoding import EncodingTag


class JPEGDecoder(CodecAdapter):
    """Single-frame JPEG decoder (greyscale, RGB, YCbCr and CMYK)."""

    tag = EncodingTag.JPEG
    pillow_format = "JPEG"

    def _decode_image(self, image: Image.Image, world: World) -> DecodedFrames:
        width, height = image.size
        ref = self._alloc_frame(world, width, height)
        out = world.arena.view(ref)

        rgb = image if image.mode == "RGB" else image.convert("RGB")
        out[..., :3] = np.asarray(rgb, dtype=np.uint8)
        out[..., 3] = 255

        return DecodedFrames(pix=ref, layout="HWC")
