"""Supported image encodings and MIME normalization."""

from __future__ import annotations

from enum import Enum

from getpixels.errors import UnsupportedTypeError


class EncodingTag(str, Enum):
    """Closed set of encodings with a codec adapter.

    Values are the canonical MIME types. There is no "unknown" member:
    anything that does not map here fails with UnsupportedTypeError.
    """

    PNG = "image/png"
    JPEG = "image/jpeg"
    GIF = "image/gif"
    BMP = "image/bmp"

    @classmethod
    def from_mime(cls, mime: str) -> EncodingTag:
        """Map a MIME type (aliases and parameters allowed) to a tag.

        Args:
            mime: MIME type such as "image/png" or "IMAGE/JPG; q=1"

        Returns:
            Matching EncodingTag

        Raises:
            UnsupportedTypeError: If the MIME type is not supported
        """
        essence = mime.split(";", 1)[0].strip().lower()
        try:
            return _MIME_ALIASES[essence]
        except KeyError:
            raise UnsupportedTypeError(f"Unsupported file type: {mime}", value=mime) from None

    @property
    def mime(self) -> str:
        return self.value


_MIME_ALIASES: dict[str, EncodingTag] = {
    "image/png": EncodingTag.PNG,
    "image/apng": EncodingTag.PNG,
    "image/jpeg": EncodingTag.JPEG,
    "image/jpg": EncodingTag.JPEG,
    "image/pjpeg": EncodingTag.JPEG,
    "image/gif": EncodingTag.GIF,
    "image/bmp": EncodingTag.BMP,
    "image/x-bmp": EncodingTag.BMP,
    "image/x-ms-bmp": EncodingTag.BMP,
}
