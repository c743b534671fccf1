#!/usr/bin/env python3
"""Example: run the decode pipeline step by step.

get_pixels() wraps these steps. Running them by hand shows which
component each system attaches to the entity.
"""

import asyncio
import io

import numpy as np
from PIL import Image

from getpixels.components.image import DecodedFrames, PixelTensor
from getpixels.components.source import ResolvedEncoding
from getpixels.core.world import World
from getpixels.sources import RawBytes, resolve_source
from getpixels.systems import DecodeFrames, NormalizeTensor, ResolveEncoding


def _animated_gif() -> bytes:
    frames = [Image.new("RGB", (64, 48), color) for color in ("red", "lime", "blue")]
    buf = io.BytesIO()
    frames[0].save(buf, format="GIF", save_all=True, append_images=frames[1:], duration=80, loop=0)
    return buf.getvalue()


def main() -> None:
    print("=== Decode pipeline ===\n")

    raw = asyncio.run(resolve_source(RawBytes(data=_animated_gif())))
    world = World(max_arena_bytes=64 << 20)
    entity = world.spawn_source(raw)
    print(f"[OK] Spawned {raw.kind} entity {entity} ({len(raw.data)} bytes)")

    world.pipe(entity).to(ResolveEncoding()).execute()
    encoding = world.get_component(entity, ResolvedEncoding)
    print(f"[OK] Resolved {encoding.mime} from {encoding.origin}")

    world.pipe(entity).to(DecodeFrames()).execute()
    decoded = world.get_component(entity, DecodedFrames)
    print(f"[OK] Decoded {decoded.layout} tensor {decoded.pix.shape}")

    tensor = (world.pipe(entity) | NormalizeTensor()).out(PixelTensor)
    pixels = np.ascontiguousarray(world.arena.view(tensor.pix))
    print(f"[OK] Normalized to {pixels.shape} {pixels.dtype}")
    for frame in tensor.frames or []:
        print(f"  frame {frame.index}: {frame.duration} ms, mean RGB {pixels[frame.index, ..., :3].mean(axis=(0, 1))}")

    print(f"\n{world}")
    world.clear()


if __name__ == "__main__":
    main()
