"""Source resolution: turn a caller's input into bytes plus type hints.

Four input shapes are recognised once, at entry, by classify():

- RawBytes: bytes, bytearray or memoryview
- DataURI: str starting with "data:"
- RemoteURL: str starting with "http://" or "https://"
- LocalPath: any other str or os.PathLike

resolve_source() then performs at most one read or one request for the
input and returns a RawSource. Raw buffers and data URIs involve no I/O
but still yield to the event loop once.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union
from urllib.parse import unquote_to_bytes

import httpx

from getpixels.components.source import RawSource
from getpixels.config import Settings
from getpixels.errors import FetchError, MalformedDataURIError, ReadError

logger = logging.getLogger(__name__)

DEFAULT_DATA_URI_TYPE = "text/plain"


@dataclass(frozen=True)
class RawBytes:
    data: bytes


@dataclass(frozen=True)
class DataURI:
    uri: str


@dataclass(frozen=True)
class RemoteURL:
    url: str


@dataclass(frozen=True)
class LocalPath:
    path: Path


SourceKind = Union[RawBytes, DataURI, RemoteURL, LocalPath]


def classify(source: Any) -> SourceKind:
    """Decide which of the four input shapes ``source`` is.

    Args:
        source: bytes-like buffer, data URI, http(s) URL, or filesystem path

    Returns:
        One of RawBytes, DataURI, RemoteURL, LocalPath

    Raises:
        TypeError: If source is none of the supported input types
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return RawBytes(data=bytes(source))
    if isinstance(source, str):
        if source.startswith("data:"):
            return DataURI(uri=source)
        if source.startswith(("http://", "https://")):
            return RemoteURL(url=source)
        return LocalPath(path=Path(source))
    if isinstance(source, os.PathLike):
        return LocalPath(path=Path(os.fspath(source)))
    raise TypeError(
        f"Expected bytes, data URI, URL or path, got {type(source).__name__}"
    )


def parse_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a ``data:`` URI into its MIME type and payload bytes.

    Follows RFC 2397: ``data:[<mediatype>][;base64],<data>``. A missing
    media type defaults to text/plain.

    Args:
        uri: The data URI

    Returns:
        (mime_type, payload)

    Raises:
        MalformedDataURIError: If the URI cannot be parsed
    """
    if not uri.startswith("data:"):
        raise MalformedDataURIError("Error parsing data URI: missing 'data:' scheme")
    header, sep, payload = uri[len("data:"):].partition(",")
    if not sep:
        raise MalformedDataURIError("Error parsing data URI: missing ',' separator")

    params = [p.strip() for p in header.split(";")]
    is_base64 = len(params) > 1 and params[-1].lower() == "base64"
    if is_base64:
        params = params[:-1]
    if params and params[0] and "=" not in params[0]:
        mime_type = params[0].lower()
    else:
        mime_type = DEFAULT_DATA_URI_TYPE
    if "/" not in mime_type:
        raise MalformedDataURIError(f"Error parsing data URI: invalid media type {mime_type!r}")

    try:
        raw = unquote_to_bytes(payload)
        if is_base64:
            data = base64.b64decode(b"".join(raw.split()), validate=True)
        else:
            data = raw
    except (binascii.Error, ValueError) as exc:
        raise MalformedDataURIError(f"Error parsing data URI: {exc}") from exc
    return mime_type, data


async def _fetch(url: str, client: httpx.AsyncClient) -> httpx.Response:
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"GET {url} failed with status {exc.response.status_code}",
            url=url,
            status_code=exc.response.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"GET {url} failed: {exc}", url=url) from exc
    return response


async def fetch_url(
    url: str,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> tuple[bytes, str | None]:
    """Fetch ``url`` with a single GET request.

    Args:
        url: http(s) URL
        client: Client to use; a short-lived one is created if None
        settings: Timeout, user agent and redirect policy for a created client

    Returns:
        (body, content_type header or None)

    Raises:
        FetchError: On transport failure or an HTTP error status
    """
    if client is None:
        settings = settings or Settings()
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout),
            headers={"User-Agent": settings.user_agent},
            follow_redirects=settings.follow_redirects,
        ) as owned:
            response = await _fetch(url, owned)
    else:
        response = await _fetch(url, client)

    logger.debug("Fetched %d bytes from %s", len(response.content), url)
    return response.content, response.headers.get("content-type")


async def read_file(path: Path) -> bytes:
    """Read ``path`` in a worker thread.

    Raises:
        ReadError: If the file cannot be read
    """
    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise ReadError(f"Cannot read {path}: {exc.strerror or exc}", path=str(path)) from exc
    logger.debug("Read %d bytes from %s", len(data), path)
    return data


async def resolve_source(
    kind: SourceKind,
    declared_type: str | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> RawSource:
    """Produce the bytes and type hints for a classified input.

    Args:
        kind: Result of classify()
        declared_type: Caller's MIME type override
        client: httpx client for remote URLs
        settings: Runtime settings for remote URLs

    Returns:
        RawSource ready for encoding resolution

    Raises:
        MalformedDataURIError: If a data URI cannot be parsed
        FetchError: If a remote fetch fails
        ReadError: If a local read fails
    """
    declared_type = declared_type or None

    if isinstance(kind, RawBytes):
        await asyncio.sleep(0)
        return RawSource(data=kind.data, kind="buffer", declared_type=declared_type)

    if isinstance(kind, DataURI):
        await asyncio.sleep(0)
        mime_type, payload = parse_data_uri(kind.uri)
        return RawSource(
            data=payload,
            kind="data_uri",
            declared_type=declared_type,
            embedded_type=mime_type,
        )

    if isinstance(kind, RemoteURL):
        body, content_type = await fetch_url(kind.url, client=client, settings=settings)
        return RawSource(
            data=body,
            kind="url",
            location=kind.url,
            declared_type=declared_type,
            fallback_type=content_type or None,
        )

    if isinstance(kind, LocalPath):
        data = await read_file(kind.path)
        guessed, _ = mimetypes.guess_type(kind.path.name)
        return RawSource(
            data=data,
            kind="path",
            location=str(kind.path),
            declared_type=declared_type,
            fallback_type=guessed,
        )

    raise TypeError(f"Unknown source kind: {type(kind).__name__}")
