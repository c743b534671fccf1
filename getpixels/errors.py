"""Error taxonomy for the pixel loading pipeline.

Every failure is terminal for the call that raised it. Each class also
derives from the closest builtin so callers that only know about
``ValueError`` / ``OSError`` / ``MemoryError`` keep working.
"""

from __future__ import annotations


class PixelsError(Exception):
    """Base class for all errors raised by getpixels."""


class UnsupportedTypeError(PixelsError, ValueError):
    """No encoding could be resolved, or the resolved one has no adapter.

    Attributes:
        value: The offending type string (None when nothing resolved)
    """

    def __init__(self, message: str, value: str | None = None) -> None:
        self.value = value
        super().__init__(message)


class MalformedDataURIError(PixelsError, ValueError):
    """A ``data:`` URI could not be parsed."""


class FetchError(PixelsError, OSError):
    """Fetching a remote URL failed.

    Attributes:
        url: Requested URL
        status_code: HTTP status when the server answered with an error
    """

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ReadError(PixelsError, OSError):
    """Reading a local file failed.

    Attributes:
        path: Path that could not be read
    """

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message)


class DecodeError(PixelsError, ValueError):
    """The decoder rejected the bytes or produced no frames."""


class ExhaustedFrameAllocationError(PixelsError, MemoryError):
    """The pixel buffer for an image could not be allocated."""
