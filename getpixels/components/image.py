"""Pixel components: DecodedFrames, PixelTensor, FrameMetadata."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from getpixels.core.arena import TensorRef

# Axis orders an adapter may declare for its native output
Layout = Literal["HWC", "WHC", "FHWC", "FWHC"]


class Component(BaseModel):
    """Base class for all pipeline components.

    Components are data containers using Pydantic for validation and type safety.
    All pixel data is stored as TensorRef handles pointing into the arena.
    """

    model_config = {"arbitrary_types_allowed": True}


class FrameMetadata(BaseModel):
    """Per-frame information of an animated image, passed through as-is.

    Attributes:
        index: Frame index (0-based, increasing)
        duration: Display time in milliseconds, if the decoder reported one
        disposal: GIF disposal method, if the decoder reported one
        info: Remaining decoder info for the frame, uninterpreted
    """

    index: int = Field(ge=0)
    duration: int | None = None
    disposal: int | None = None
    info: dict[str, Any] = Field(default_factory=dict)


class DecodedFrames(Component):
    """Output of a codec adapter, in the adapter's native axis order.

    Attributes:
        pix: TensorRef to uint8 RGBA samples
        layout: Axis order of pix (H=height, W=width, C=channel, F=frame)
        frames: Per-frame metadata for animated images, else None
    """

    pix: TensorRef
    layout: Layout
    frames: list[FrameMetadata] | None = None


class PixelTensor(Component):
    """Canonical pixels: (H, W, 4) or (F, H, W, 4) uint8.

    Attributes:
        pix: TensorRef in canonical axis order (may need a contiguous copy)
        frames: Per-frame metadata for animated images, else None
    """

    pix: TensorRef
    frames: list[FrameMetadata] | None = None
