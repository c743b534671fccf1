"""Tensor normalization to the canonical axis order.

Canonical order is (H, W, C) for still images and (F, H, W, C) for
animations, uint8 with C == 4. Adapters declare their native order as a
string of axis letters; the permutation is applied to the TensorRef, so
no pixels move until the caller materializes a contiguous array.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from getpixels.codecs.base import CHANNELS
from getpixels.components.image import DecodedFrames, PixelTensor
from getpixels.core.arena import TensorRef
from getpixels.core.system import System

if TYPE_CHECKING:
    from getpixels.core.world import World

CANONICAL_STILL = "HWC"
CANONICAL_ANIMATED = "FHWC"


def canonical_axes(layout: str) -> tuple[int, ...]:
    """Permutation taking ``layout`` to the canonical order.

    Example:
        >>> canonical_axes("WHC")
        (1, 0, 2)
        >>> canonical_axes("FWHC")
        (0, 2, 1, 3)
    """
    target = CANONICAL_ANIMATED if "F" in layout else CANONICAL_STILL
    if sorted(layout) != sorted(target):
        raise ValueError(f"Unknown layout {layout!r}")
    return tuple(layout.index(axis) for axis in target)


def normalize(ref: TensorRef, layout: str) -> TensorRef:
    """Reorder ``ref`` from ``layout`` to canonical order.

    Raises:
        ValueError: If dtype, rank or channel count break the pixel contract
    """
    if ref.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {ref.dtype}")
    if ref.ndim != len(layout):
        raise ValueError(f"Layout {layout!r} does not match tensor rank {ref.ndim}")
    axes = canonical_axes(layout)
    canonical = ref.transpose(axes)
    if canonical.shape[-1] != CHANNELS:
        raise ValueError(f"Expected {CHANNELS} channels, got shape {canonical.shape}")
    return canonical


class NormalizeTensor(System):
    """DecodedFrames -> PixelTensor."""

    def required_components(self) -> list[type]:
        return [DecodedFrames]

    def produced_components(self) -> list[type]:
        return [PixelTensor]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            decoded = world.get_component(eid, DecodedFrames)
            world.add_component(
                eid,
                PixelTensor(pix=normalize(decoded.pix, decoded.layout), frames=decoded.frames),
            )
