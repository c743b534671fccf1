"""High-level API: load any supported image source as RGBA pixels.

Each call builds its own World, runs the resolve -> decode -> normalize
pipeline on a single entity, and clears the World before returning.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
import numpy as np

from getpixels.components.image import FrameMetadata, PixelTensor
from getpixels.components.source import ResolvedEncoding
from getpixels.config import Settings, load_settings
from getpixels.core.world import World
from getpixels.encoding import EncodingTag
from getpixels.sources import SourceKind, classify, resolve_source
from getpixels.systems import DecodeFrames, NormalizeTensor, ResolveEncoding

logger = logging.getLogger(__name__)

PixelCallback = Callable[[Exception | None, np.ndarray | None, list[FrameMetadata] | None], Any]

# Settings from the auto-detected config file, read on the first call without settings=
_default_settings: Settings | None = None


async def _resolve_settings(settings: Settings | None) -> Settings:
    global _default_settings
    if settings is not None:
        return settings
    if _default_settings is None:
        _default_settings = await asyncio.to_thread(load_settings)
    return _default_settings


@dataclass(frozen=True)
class PixelResult:
    """Decoded pixels of one image source.

    Attributes:
        pixels: C-contiguous uint8 array, (H, W, 4) or (F, H, W, 4)
        frames: One FrameMetadata per frame for animated images, else None
        encoding: Encoding the bytes were decoded as
    """

    pixels: np.ndarray
    frames: list[FrameMetadata] | None
    encoding: EncodingTag

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.pixels.shape)

    @property
    def is_animated(self) -> bool:
        return self.frames is not None


async def get_pixels(
    source: Any,
    declared_type: str | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> PixelResult:
    """Load ``source`` as an RGBA pixel array.

    Args:
        source: bytes-like buffer, "data:" URI, http(s) URL, or filesystem path
        declared_type: MIME type overriding auto-detection (e.g. "image/png")
        client: httpx client used for remote URLs
        settings: Runtime settings; if None, getpixels.toml is read once on
            the first such call and reused afterwards

    Returns:
        PixelResult with pixels of shape (H, W, 4), or (F, H, W, 4) for an
        animated GIF together with per-frame metadata

    Raises:
        UnsupportedTypeError: If the encoding cannot be determined or is unsupported
        MalformedDataURIError: If a data URI cannot be parsed
        FetchError: If fetching a URL fails
        ReadError: If reading a file fails
        DecodeError: If the decoder rejects the bytes
        ExhaustedFrameAllocationError: If the pixel buffer cannot be allocated
        TypeError: If source is not a supported input type
        FileNotFoundError: If GETPIXELS_CONFIG names a missing file
        pydantic.ValidationError: If the config file holds invalid values

    Example:
        >>> result = await get_pixels("photo.jpg")
        >>> result.pixels.shape
        (480, 640, 4)
    """
    return await _load(classify(source), declared_type, client=client, settings=settings)


async def _load(
    kind: SourceKind,
    declared_type: str | None,
    *,
    client: httpx.AsyncClient | None,
    settings: Settings | None,
) -> PixelResult:
    settings = await _resolve_settings(settings)

    raw = await resolve_source(kind, declared_type, client=client, settings=settings)

    world = World(max_arena_bytes=settings.max_frame_bytes)
    try:
        entity = world.spawn_source(raw)
        tensor: PixelTensor = (
            world.pipe(entity)
            .to(ResolveEncoding())
            .to(DecodeFrames())
            .to(NormalizeTensor())
            .out(PixelTensor)
        )
        encoding = world.get_component(entity, ResolvedEncoding)

        # Copies only when the canonical view is not already contiguous
        pixels = np.ascontiguousarray(world.arena.view(tensor.pix))
        meta = world.metadata[entity]
        logger.debug(
            "Decoded %s source of %d bytes to %s as %s",
            meta["source_kind"],
            meta["source_bytes"],
            pixels.shape,
            encoding.tag.name,
        )
        return PixelResult(pixels=pixels, frames=tensor.frames, encoding=encoding.tag)
    finally:
        world.clear()


def get_pixels_sync(
    source: Any,
    declared_type: str | None = None,
    *,
    settings: Settings | None = None,
) -> PixelResult:
    """Blocking wrapper around get_pixels() for code without an event loop."""
    return asyncio.run(get_pixels(source, declared_type, settings=settings))


def get_pixels_callback(
    source: Any,
    declared_type: str | None,
    callback: PixelCallback,
    *,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> asyncio.Task[None]:
    """Schedule get_pixels() and report through ``callback(error, pixels, frames)``.

    The callback runs exactly once, from the event loop, never before this
    function returns. On success ``error`` is None; on failure ``pixels``
    and ``frames`` are None. Any exception raised while loading, including
    a missing or invalid config file, is delivered as ``error``. Must be
    called with a running event loop.

    Returns:
        The scheduled task, which completes after the callback has run

    Raises:
        TypeError: Immediately, if source is not a supported input type
        RuntimeError: If no event loop is running
    """
    kind = classify(source)
    loop = asyncio.get_running_loop()

    async def runner() -> None:
        try:
            result = await _load(kind, declared_type, client=client, settings=settings)
        except Exception as exc:
            logger.debug("Delivering %s to callback", type(exc).__name__)
            callback(exc, None, None)
            return
        callback(None, result.pixels, result.frames)

    return loop.create_task(runner())
