from getpixels.systems.decode import DecodeFrames
from getpixels.systems.normalize import NormalizeTensor, canonical_axes, normalize
from getpixels.systems.resolve import ResolveEncoding, resolve_encoding

__all__ = [
    "DecodeFrames",
    "NormalizeTensor",
    "ResolveEncoding",
    "canonical_axes",
    "normalize",
    "resolve_encoding",
]
