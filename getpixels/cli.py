"""Command line entry point: decode one source and print a summary.

Usage:
    getpixels photo.png
    getpixels https://example.com/anim.gif --json
    getpixels "data:image/png;base64,..." --type image/png -v
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from pydantic import ValidationError

from getpixels import __version__
from getpixels.api import PixelResult, get_pixels_sync
from getpixels.config import TOMLDecodeError, load_settings
from getpixels.errors import PixelsError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="getpixels",
        description="Decode an image source and report its RGBA pixel array.",
    )
    parser.add_argument("source", help="File path, http(s) URL or data: URI")
    parser.add_argument(
        "--type",
        dest="declared_type",
        default=None,
        help="MIME type overriding auto-detection, e.g. image/png",
    )
    parser.add_argument("--config", default=None, help="Path to getpixels.toml")
    parser.add_argument("--json", action="store_true", help="Print a JSON summary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _describe_validation(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def summarize(result: PixelResult) -> dict[str, Any]:
    """JSON-friendly summary of a decoded source."""
    summary: dict[str, Any] = {
        "encoding": result.encoding.mime,
        "shape": list(result.shape),
        "dtype": str(result.pixels.dtype),
        "frames": len(result.frames) if result.frames is not None else None,
    }
    if result.frames is not None:
        summary["durations"] = [frame.duration for frame in result.frames]
    return summary


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
    except ValidationError as exc:
        print(f"getpixels: invalid config: {_describe_validation(exc)}", file=sys.stderr)
        return 1
    except TOMLDecodeError as exc:
        print(f"getpixels: invalid config: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"getpixels: {exc}", file=sys.stderr)
        return 1

    try:
        result = get_pixels_sync(args.source, args.declared_type, settings=settings)
    except PixelsError as exc:
        print(f"getpixels: {exc}", file=sys.stderr)
        return 1

    summary = summarize(result)
    if args.json:
        print(json.dumps(summary))
    else:
        print(f"encoding: {summary['encoding']}")
        print(f"shape:    {tuple(summary['shape'])}")
        print(f"dtype:    {summary['dtype']}")
        if summary["frames"] is not None:
            print(f"frames:   {summary['frames']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
