"""Source components: RawSource, ResolvedEncoding."""

from typing import Literal

from pydantic import Field

from getpixels.components.image import Component
from getpixels.encoding import EncodingTag

SourceKindName = Literal["buffer", "data_uri", "url", "path"]
EncodingOrigin = Literal["declared", "embedded", "signature", "content_type", "extension"]


class RawSource(Component):
    """Bytes of one image plus the type hints gathered while reading them.

    Attributes:
        data: Encoded image bytes
        kind: Which input shape produced the bytes
        location: URL or path for remote/local sources
        declared_type: Caller-supplied MIME type, overrides everything
        embedded_type: MIME type carried inside a data URI
        fallback_type: Content-Type header or extension-derived MIME type
    """

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    data: bytes
    kind: SourceKindName
    location: str | None = None
    declared_type: str | None = None
    embedded_type: str | None = None
    fallback_type: str | None = None


class ResolvedEncoding(Component):
    """Encoding chosen for a RawSource.

    Attributes:
        tag: Encoding that selects the codec adapter
        mime: The MIME string the tag was resolved from
        origin: Strategy that produced the MIME string
    """

    tag: EncodingTag
    mime: str = Field(min_length=1)
    origin: EncodingOrigin
