"""Encoding resolution: pick the encoding for a RawSource.

Order per input shape:

- buffer:   declared type, then signature
- data_uri: declared type, then the URI's own MIME type
- url:      declared type, then signature, then Content-Type header
- path:     declared type, then signature, then file extension

The declared type always wins, even when it does not match the bytes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from getpixels.components.source import EncodingOrigin, RawSource, ResolvedEncoding
from getpixels.core.system import System
from getpixels.encoding import EncodingTag
from getpixels.errors import UnsupportedTypeError
from getpixels.sniff import sniff_mime

if TYPE_CHECKING:
    from getpixels.core.world import World

logger = logging.getLogger(__name__)

Candidate = tuple[EncodingOrigin, str | None]

_UNKNOWN_FILE = "Invalid file type: cannot determine image type"
_UNKNOWN_CONTENT = "Invalid content-type: cannot determine image type"


def _candidates(source: RawSource) -> tuple[list[Candidate], str]:
    """Strategies for ``source`` in order, and the error when none yields a type."""
    declared: Candidate = ("declared", source.declared_type)
    match source.kind:
        case "buffer":
            return [declared, ("signature", sniff_mime(source.data))], _UNKNOWN_FILE
        case "data_uri":
            return [declared, ("embedded", source.embedded_type)], _UNKNOWN_FILE
        case "url":
            return [
                declared,
                ("signature", sniff_mime(source.data)),
                ("content_type", source.fallback_type),
            ], _UNKNOWN_CONTENT
        case "path":
            return [
                declared,
                ("signature", sniff_mime(source.data)),
                ("extension", source.fallback_type),
            ], _UNKNOWN_FILE


def resolve_encoding(source: RawSource) -> ResolvedEncoding:
    """Choose the encoding of ``source``.

    Strategies are consulted in order; the first one that yields a type
    decides, and an unsupported type is not skipped over.

    Raises:
        UnsupportedTypeError: If no strategy yields a type, or the chosen
            type has no codec adapter
    """
    strategies, unresolved = _candidates(source)
    for origin, mime in strategies:
        if mime:
            tag = EncodingTag.from_mime(mime)
            logger.debug("Resolved %s source as %s from %s", source.kind, tag.name, origin)
            return ResolvedEncoding(tag=tag, mime=mime, origin=origin)
    raise UnsupportedTypeError(unresolved)


class ResolveEncoding(System):
    """RawSource -> ResolvedEncoding."""

    def required_components(self) -> list[type]:
        return [RawSource]

    def produced_components(self) -> list[type]:
        return [ResolvedEncoding]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            source = world.get_component(eid, RawSource)
            world.add_component(eid, resolve_encoding(source))
