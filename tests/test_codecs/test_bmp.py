"""Tests for BMP decoding."""

import numpy as np
import pytest

from getpixels.codecs.bmp import BMPDecoder
from getpixels.core.world import World
from getpixels.errors import DecodeError


class TestBMPDecoder:
    """Tests for BMPDecoder."""

    def test_rgb_exact(self, bmp_bytes: bytes, rgba_array: np.ndarray) -> None:
        """Test 24-bit BMP colour is exact, top row first, with opaque alpha."""
        world = World()

        decoded = BMPDecoder().decode(bmp_bytes, world)
        view = world.arena.view(decoded.pix)

        assert decoded.layout == "HWC"
        assert view.shape == (3, 5, 4)
        np.testing.assert_array_equal(view[..., :3], rgba_array[..., :3])
        assert (view[..., 3] == 255).all()

    def test_truncated(self, bmp_bytes: bytes) -> None:
        """Test a cut-off pixel array raises DecodeError."""
        with pytest.raises(DecodeError, match="Error decoding bmp"):
            BMPDecoder().decode(bmp_bytes[:40], World())
