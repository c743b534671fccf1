"""Shared fixtures: small images encoded in memory with Pillow."""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import Any

import numpy as np
import pytest
from PIL import Image

# Solid colours for animation frames (distinct so no frame is merged)
FRAME_COLORS = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
FRAME_DURATIONS = [100, 200, 300]


def gradient_rgba(width: int, height: int) -> np.ndarray:
    """Deterministic (H, W, 4) uint8 image with distinct rows and columns."""
    ys, xs = np.mgrid[0:height, 0:width]
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[..., 0] = (xs * 37) % 256
    img[..., 1] = (ys * 53) % 256
    img[..., 2] = (xs * 11 + ys * 7) % 256
    img[..., 3] = 255 - (xs + ys) % 128
    return img


def encode_image(image: Image.Image, fmt: str, **params: Any) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format=fmt, **params)
    return buf.getvalue()


def animated_gif(width: int, height: int, colors: list[tuple[int, int, int]]) -> bytes:
    frames = [Image.new("RGB", (width, height), color) for color in colors]
    return encode_image(
        frames[0],
        "GIF",
        save_all=True,
        append_images=frames[1:],
        duration=FRAME_DURATIONS[: len(colors)],
        loop=0,
    )


@pytest.fixture
def rgba_array() -> np.ndarray:
    """5 wide, 3 high RGBA gradient."""
    return gradient_rgba(5, 3)


@pytest.fixture
def png_bytes(rgba_array: np.ndarray) -> bytes:
    return encode_image(Image.fromarray(rgba_array), "PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    """16 wide, 8 high flat grey JPEG."""
    return encode_image(Image.new("RGB", (16, 8), (128, 128, 128)), "JPEG", quality=95)


@pytest.fixture
def bmp_bytes(rgba_array: np.ndarray) -> bytes:
    rgb = Image.fromarray(np.ascontiguousarray(rgba_array[..., :3]))
    return encode_image(rgb, "BMP")


@pytest.fixture
def gif_still_bytes() -> bytes:
    """6 wide, 4 high single-frame GIF."""
    return encode_image(Image.new("RGB", (6, 4), (255, 0, 0)), "GIF")


@pytest.fixture
def gif_animated_bytes() -> bytes:
    """6 wide, 4 high GIF with three solid frames."""
    return animated_gif(6, 4, FRAME_COLORS)


@pytest.fixture
def image_factory() -> Callable[[str, int, int], bytes]:
    """Build a single-frame image of the given format and size."""

    def factory(fmt: str, width: int, height: int) -> bytes:
        rgba = gradient_rgba(width, height)
        if fmt in ("JPEG", "BMP"):
            return encode_image(Image.fromarray(np.ascontiguousarray(rgba[..., :3])), fmt)
        if fmt == "GIF":
            return encode_image(Image.new("RGB", (width, height), (0, 0, 255)), fmt)
        return encode_image(Image.fromarray(rgba), fmt)

    return factory
