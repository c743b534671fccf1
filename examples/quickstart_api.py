#!/usr/bin/env python3
"""Quickstart example using the high-level get_pixels API.

Loads an image from a path, URL or data URI (or a generated PNG when no
source is given) and prints the shape of the RGBA array.
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import io

import numpy as np
from PIL import Image

from getpixels import PixelsError, get_pixels, get_pixels_callback


def _demo_data_uri() -> str:
    ramp = np.tile(np.arange(0, 256, 4, dtype=np.uint8), (32, 1))
    buf = io.BytesIO()
    Image.fromarray(ramp).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode()


def _report(error: Exception | None, pixels: np.ndarray | None, frames: list | None) -> None:
    if error is not None:
        print(f"[callback] failed: {error}")
        return
    print(f"[callback] {pixels.shape}, {len(frames) if frames else 0} frame records")


async def run(source: str, declared_type: str | None) -> None:
    try:
        result = await get_pixels(source, declared_type)
    except PixelsError as exc:
        print(f"[ERROR] {exc}")
        return

    print(f"[OK] {result.encoding.mime}: {result.shape} {result.pixels.dtype}")
    if result.is_animated:
        durations = [frame.duration for frame in result.frames]
        print(f"  {len(durations)} frames, durations {durations}")

    await get_pixels_callback(source, declared_type, _report)


def main() -> None:
    parser = argparse.ArgumentParser(description="Quickstart API example")
    parser.add_argument("source", nargs="?", default=None, help="Path, URL or data URI")
    parser.add_argument("--type", dest="declared_type", default=None, help="MIME type override")
    args = parser.parse_args()

    source = args.source if args.source is not None else _demo_data_uri()
    asyncio.run(run(source, args.declared_type))


if __name__ == "__main__":
    main()
