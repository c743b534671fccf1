"""GIF adapter with animation support.

Animated GIFs are decoded into one contiguous (F, H, W, 4) arena buffer.
Frame i is written only through the subref for index i, so the writes are
disjoint slices of the buffer and happen in increasing index order. A
parallel decoder must keep that one-slice-per-frame contract.

A GIF with a single frame is returned as (H, W, 4) with no frame
metadata, the same shape as a PNG or JPEG.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from PIL import Image

from getpixels.codecs.base import CHANNELS, CodecAdapter
from getpixels.components.image import DecodedFrames, FrameMetadata
from getpixels.core.world import World
from getpixels.encoding import EncodingTag
from getpixels.errors import DecodeError

logger = logging.getLogger(__name__)


def frame_metadata(image: Image.Image, index: int) -> FrameMetadata:
    """Collect the decoder's info for the current frame of ``image``."""
    info: dict[str, Any] = dict(image.info)
    duration = info.pop("duration", None)
    disposal = getattr(image, "disposal_method", None)
    return FrameMetadata(
        index=index,
        duration=int(duration) if duration is not None else None,
        disposal=int(disposal) if disposal is not None else None,
        info=info,
    )


class GIFDecoder(CodecAdapter):
    """GIF decoder producing HWC for still images and FHWC for animations."""

    tag = EncodingTag.GIF
    pillow_format = "GIF"

    def _decode_image(self, image: Image.Image, world: World) -> DecodedFrames:
        n_frames = int(getattr(image, "n_frames", 1))
        if n_frames < 1:
            raise DecodeError("Error decoding gif: decoder reported no frames")

        width, height = image.size
        if n_frames == 1:
            ref = self._alloc_frame(world, width, height)
            np.copyto(world.arena.view(ref), np.asarray(image.convert("RGBA"), dtype=np.uint8))
            return DecodedFrames(pix=ref, layout="HWC")

        logger.debug("Decoding %d GIF frames of %dx%d", n_frames, width, height)
        world.provision_arena(n_frames * height * width * CHANNELS)
        ref = world.arena.alloc_tensor((n_frames, height, width, CHANNELS), np.uint8)

        frames: list[FrameMetadata] = []
        for index in range(n_frames):
            image.seek(index)
            rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
            np.copyto(world.arena.view(ref.subref((index,))), rgba)
            frames.append(frame_metadata(image, index))

        return DecodedFrames(pix=ref, layout="FHWC", frames=frames)
