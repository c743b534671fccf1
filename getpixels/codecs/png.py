"""PNG adapter: Pillow's RGBA raster is already row-major (H, W, 4)."""

from __future__ import annotations

import numpy as np
from PIL import Image

from getpixels.codecs.base import CodecAdapter
from getpixels.components.image import DecodedFrames
from getpixels.core.world import World
from getpixels.encoding import EncodingTag

# Pillow modes holding 16/32-bit greyscale samples
_WIDE_GREY_MODES = ("I", "I;16", "I;16B", "I;16L")


class PNGDecoder(CodecAdapter):
    """Single-frame PNG decoder.

    16-bit greyscale is reduced to 8 bits by dropping the low byte, since
    Pillow's own conversion clips instead of scaling.
    """

    tag = EncodingTag.PNG
    pillow_format = "PNG"

    def _decode_image(self, image: Image.Image, world: World) -> DecodedFrames:
        width, height = image.size
        ref = self._alloc_frame(world, width, height)
        out = world.arena.view(ref)

        if image.mode in _WIDE_GREY_MODES:
            grey = (np.asarray(image, dtype=np.uint32) >> 8).astype(np.uint8)
            out[..., :3] = grey[..., np.newaxis]
            out[..., 3] = 255
        else:
            rgba = image.convert("RGBA")
            out.reshape(-1)[:] = np.frombuffer(rgba.tobytes(), dtype=np.uint8)

        return DecodedFrames(pix=ref, layout="HWC")
