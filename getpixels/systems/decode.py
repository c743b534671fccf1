"""Decode stage: run the codec adapter selected by the resolved encoding."""

from __future__ import annotations

from typing import TYPE_CHECKING

from getpixels.codecs.dispatch import dispatch
from getpixels.components.image import DecodedFrames
from getpixels.components.source import RawSource, ResolvedEncoding
from getpixels.core.system import System

if TYPE_CHECKING:
    from getpixels.core.world import World


class DecodeFrames(System):
    """RawSource + ResolvedEncoding -> DecodedFrames.

    Each World owns a single arena, so one call decodes one entity.
    """

    def required_components(self) -> list[type]:
        return [RawSource, ResolvedEncoding]

    def produced_components(self) -> list[type]:
        return [DecodedFrames]

    def run(self, world: World, eids: list[int]) -> None:
        if len(eids) > 1:
            raise ValueError(f"DecodeFrames handles one entity per world, got {len(eids)}")
        for eid in eids:
            source = world.get_component(eid, RawSource)
            encoding = world.get_component(eid, ResolvedEncoding)
            adapter = dispatch(encoding.tag)
            world.add_component(eid, adapter.decode(source.data, world))
