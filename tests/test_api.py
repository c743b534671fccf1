"""Tests for the high-level get_pixels API."""

import base64
import builtins
import logging
import os
from collections.abc import Callable
from pathlib import Path

import httpx
import numpy as np
import pytest

from getpixels import (
    DecodeError,
    EncodingTag,
    ExhaustedFrameAllocationError,
    PixelResult,
    Settings,
    UnsupportedTypeError,
    get_pixels,
    get_pixels_callback,
    get_pixels_sync,
)
from getpixels import api
from getpixels.codecs.png import PNGDecoder
from getpixels.config import CONFIG_ENV
from getpixels.errors import PixelsError

SETTINGS = Settings()


class TestGetPixels:
    """Tests for get_pixels() on in-memory buffers."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fmt", ["PNG", "JPEG", "GIF", "BMP"])
    async def test_shape_per_format(
        self, fmt: str, image_factory: Callable[[str, int, int], bytes]
    ) -> None:
        """Test every format yields a contiguous (H, W, 4) uint8 array."""
        result = await get_pixels(image_factory(fmt, 7, 3), settings=SETTINGS)

        assert isinstance(result, PixelResult)
        assert result.shape == (3, 7, 4)
        assert result.pixels.dtype == np.uint8
        assert result.pixels.flags["C_CONTIGUOUS"]
        assert result.encoding is EncodingTag[fmt]
        assert not result.is_animated

    @pytest.mark.asyncio
    async def test_png_values(self, png_bytes: bytes, rgba_array: np.ndarray) -> None:
        """Test the returned pixels equal the encoded samples."""
        result = await get_pixels(png_bytes, settings=SETTINGS)
        np.testing.assert_array_equal(result.pixels, rgba_array)

    @pytest.mark.asyncio
    async def test_unknown_bytes(self) -> None:
        """Test bytes with no known signature raise UnsupportedTypeError."""
        with pytest.raises(UnsupportedTypeError):
            await get_pixels(b"II*\x00\x08\x00\x00\x00", settings=SETTINGS)

    @pytest.mark.asyncio
    async def test_declared_type_mismatch(self, png_bytes: bytes) -> None:
        """Test PNG bytes declared as JPEG fail to decode rather than fall back."""
        with pytest.raises(DecodeError):
            await get_pixels(png_bytes, "image/jpeg", settings=SETTINGS)

    @pytest.mark.asyncio
    async def test_declared_unsupported(self, png_bytes: bytes) -> None:
        """Test an unsupported declared type is reported by name."""
        with pytest.raises(UnsupportedTypeError, match="image/tiff"):
            await get_pixels(png_bytes, "image/tiff", settings=SETTINGS)

    @pytest.mark.asyncio
    async def test_animated_gif(self, gif_animated_bytes: bytes) -> None:
        """Test an animated GIF yields (F, H, W, 4) and F metadata entries."""
        result = await get_pixels(gif_animated_bytes, settings=SETTINGS)

        assert result.shape == (3, 4, 6, 4)
        assert result.is_animated
        assert result.frames is not None
        assert len(result.frames) == 3
        assert [frame.duration for frame in result.frames] == [100, 200, 300]

    @pytest.mark.asyncio
    async def test_still_gif(self, gif_still_bytes: bytes) -> None:
        """Test a single-frame GIF has no frame metadata."""
        result = await get_pixels(gif_still_bytes, settings=SETTINGS)

        assert result.shape == (4, 6, 4)
        assert result.frames is None

    @pytest.mark.asyncio
    async def test_repeatable(self, gif_animated_bytes: bytes) -> None:
        """Test decoding the same bytes twice gives equal arrays."""
        first = await get_pixels(gif_animated_bytes, settings=SETTINGS)
        second = await get_pixels(gif_animated_bytes, settings=SETTINGS)

        np.testing.assert_array_equal(first.pixels, second.pixels)
        assert first.pixels is not second.pixels

    @pytest.mark.asyncio
    async def test_result_outlives_call(self, png_bytes: bytes, rgba_array: np.ndarray) -> None:
        """Test the array stays valid and writable after the World is cleared."""
        result = await get_pixels(png_bytes, settings=SETTINGS)
        await get_pixels(png_bytes, settings=SETTINGS)

        result.pixels[0, 0, 0] ^= 0xFF
        result.pixels[0, 0, 0] ^= 0xFF
        np.testing.assert_array_equal(result.pixels, rgba_array)

    @pytest.mark.asyncio
    async def test_frame_limit(self, png_bytes: bytes) -> None:
        """Test max_frame_bytes bounds the pixel buffer."""
        with pytest.raises(ExhaustedFrameAllocationError):
            await get_pixels(png_bytes, settings=Settings(max_frame_bytes=8))

    @pytest.mark.asyncio
    async def test_unsupported_input(self) -> None:
        """Test non-source objects raise TypeError."""
        with pytest.raises(TypeError):
            await get_pixels(3.14, settings=SETTINGS)


class TestSourceKinds:
    """get_pixels() over data URIs, paths and URLs."""

    @pytest.mark.asyncio
    async def test_data_uri_matches_buffer(self, png_bytes: bytes) -> None:
        """Test a data URI decodes to the same array as the raw bytes."""
        uri = "data:image/png;base64," + base64.b64encode(png_bytes).decode()

        from_uri = await get_pixels(uri, settings=SETTINGS)
        from_bytes = await get_pixels(png_bytes, settings=SETTINGS)

        np.testing.assert_array_equal(from_uri.pixels, from_bytes.pixels)

    @pytest.mark.asyncio
    async def test_path(self, tmp_path: Path, bmp_bytes: bytes) -> None:
        """Test str and Path sources read from disk."""
        path = tmp_path / "image.bmp"
        path.write_bytes(bmp_bytes)

        from_str = await get_pixels(str(path), settings=SETTINGS)
        from_path = await get_pixels(path, settings=SETTINGS)

        assert from_str.shape == (3, 5, 4)
        np.testing.assert_array_equal(from_str.pixels, from_path.pixels)

    @pytest.mark.asyncio
    async def test_path_extension_fallback_is_not_used_over_content(
        self, tmp_path: Path, png_bytes: bytes
    ) -> None:
        """Test a PNG saved with a .gif name still decodes as PNG."""
        path = tmp_path / "misnamed.gif"
        path.write_bytes(png_bytes)

        result = await get_pixels(path, settings=SETTINGS)

        assert result.encoding is EncodingTag.PNG

    @pytest.mark.asyncio
    async def test_url(self, jpeg_bytes: bytes) -> None:
        """Test a remote URL is fetched with the given client."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=jpeg_bytes, headers={"Content-Type": "image/jpeg"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await get_pixels("https://example.com/photo", client=client, settings=SETTINGS)

        assert result.shape == (8, 16, 4)
        assert result.encoding is EncodingTag.JPEG


class TestWrappers:
    """Tests for the sync and callback wrappers."""

    def test_sync(self, png_bytes: bytes, rgba_array: np.ndarray) -> None:
        """Test get_pixels_sync() runs without an event loop."""
        result = get_pixels_sync(png_bytes, settings=SETTINGS)
        np.testing.assert_array_equal(result.pixels, rgba_array)

    @pytest.mark.asyncio
    async def test_callback_success(self, gif_animated_bytes: bytes) -> None:
        """Test the callback runs once, after the call returns, with pixels and frames."""
        calls: list[tuple] = []

        task = get_pixels_callback(
            gif_animated_bytes, None, lambda *args: calls.append(args), settings=SETTINGS
        )
        assert calls == []
        await task

        assert len(calls) == 1
        error, pixels, frames = calls[0]
        assert error is None
        assert pixels.shape == (3, 4, 6, 4)
        assert len(frames) == 3

    @pytest.mark.asyncio
    async def test_callback_error(self, png_bytes: bytes) -> None:
        """Test failures are delivered to the callback exactly once."""
        calls: list[tuple] = []

        await get_pixels_callback(
            png_bytes, "image/gif", lambda *args: calls.append(args), settings=SETTINGS
        )

        assert len(calls) == 1
        error, pixels, frames = calls[0]
        assert isinstance(error, PixelsError)
        assert pixels is None
        assert frames is None

    @pytest.mark.asyncio
    async def test_callback_type_error_is_immediate(self) -> None:
        """Test unsupported input raises before anything is scheduled."""
        calls: list[tuple] = []

        with pytest.raises(TypeError):
            get_pixels_callback(object(), None, lambda *args: calls.append(args))
        assert calls == []

    def test_callback_needs_loop(self, png_bytes: bytes) -> None:
        """Test calling without a running loop raises RuntimeError."""
        with pytest.raises(RuntimeError):
            get_pixels_callback(png_bytes, None, lambda *args: None)

    @pytest.mark.asyncio
    async def test_callback_unexpected_error(
        self, png_bytes: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test errors outside the PixelsError hierarchy still reach the callback."""

        def broken(self, image, world):
            raise RuntimeError("decoder bug")

        monkeypatch.setattr(PNGDecoder, "_decode_image", broken)
        calls: list[tuple] = []

        await get_pixels_callback(
            png_bytes, None, lambda *args: calls.append(args), settings=SETTINGS
        )

        assert len(calls) == 1
        assert isinstance(calls[0][0], RuntimeError)
        assert calls[0][1:] == (None, None)


class TestDefaultSettings:
    """Calls without settings= use the config file, read once."""

    @pytest.fixture(autouse=True)
    def fresh_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr(api, "_default_settings", None)
        monkeypatch.delenv(CONFIG_ENV, raising=False)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.chdir(tmp_path)

    @pytest.mark.asyncio
    async def test_config_read_once(
        self, tmp_path: Path, png_bytes: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test two raw-buffer calls open getpixels.toml once and both apply it."""
        (tmp_path / "getpixels.toml").write_text("[getpixels]\nmax_frame_bytes = 8\n")
        opened: list[str] = []
        real_open = builtins.open

        def counting_open(file, *args, **kwargs):
            if isinstance(file, (str, os.PathLike)):
                opened.append(os.fspath(file))
            return real_open(file, *args, **kwargs)

        monkeypatch.setattr(builtins, "open", counting_open)

        for _ in range(2):
            with pytest.raises(ExhaustedFrameAllocationError):
                await get_pixels(png_bytes)

        assert [name for name in opened if name.endswith("getpixels.toml")] == ["getpixels.toml"]

    @pytest.mark.asyncio
    async def test_explicit_settings_skip_config(
        self, tmp_path: Path, png_bytes: bytes
    ) -> None:
        """Test explicit settings are used as given and nothing is cached."""
        (tmp_path / "getpixels.toml").write_text("[getpixels]\nmax_frame_bytes = 8\n")

        result = await get_pixels(png_bytes, settings=SETTINGS)

        assert result.shape == (3, 5, 4)
        assert api._default_settings is None

    @pytest.mark.asyncio
    async def test_callback_missing_config(
        self, tmp_path: Path, png_bytes: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a missing config file is delivered to the callback exactly once."""
        monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "missing.toml"))
        calls: list[tuple] = []

        await get_pixels_callback(png_bytes, None, lambda *args: calls.append(args))

        assert len(calls) == 1
        error, pixels, frames = calls[0]
        assert isinstance(error, FileNotFoundError)
        assert pixels is None
        assert frames is None

    @pytest.mark.asyncio
    async def test_debug_log_reports_source(
        self, png_bytes: bytes, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test the decode log line names the source kind and byte count."""
        caplog.set_level(logging.DEBUG, logger="getpixels.api")

        await get_pixels(png_bytes, settings=SETTINGS)

        assert f"Decoded buffer source of {len(png_bytes)} bytes" in caplog.text
