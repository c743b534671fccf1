"""Runtime settings loaded from ``getpixels.toml``.

Lookup order:
1. ``GETPIXELS_CONFIG`` environment variable
2. Explicit ``config_path`` argument
3. ``./getpixels.toml`` then ``~/getpixels.toml``
4. Built-in defaults

Example file:

    [getpixels]
    http_timeout = 10.0
    user_agent = "my-app/1.0"
    max_frame_bytes = 268435456
"""

from __future__ import annotations

import os
from typing import Any, cast

from pydantic import BaseModel, Field

# TOML loading for Python 3.11+ and older
try:
    import tomllib  # type: ignore[import-not-found, unused-ignore]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef, unused-ignore]

from getpixels import __version__

TOMLDecodeError = tomllib.TOMLDecodeError

CONFIG_ENV = "GETPIXELS_CONFIG"
CONFIG_FILENAME = "getpixels.toml"


class Settings(BaseModel):
    """Validated runtime settings.

    Attributes:
        http_timeout: Total timeout in seconds for remote fetches
        user_agent: User-Agent header sent with remote fetches
        follow_redirects: Whether remote fetches follow redirects
        max_frame_bytes: Upper bound on the pixel buffer of one call
    """

    model_config = {"frozen": True, "extra": "forbid"}

    http_timeout: float = Field(default=30.0, gt=0.0)
    user_agent: str = Field(default=f"getpixels/{__version__}", min_length=1)
    follow_redirects: bool = True
    max_frame_bytes: int = Field(default=1 << 30, gt=0)


def _resolve_config_path(config_path: str | None) -> str | None:
    """Resolve configuration path from env, explicit path, or defaults."""
    env_config = os.environ.get(CONFIG_ENV)
    if env_config:
        return env_config
    if config_path:
        return config_path
    candidates = [
        CONFIG_FILENAME,
        os.path.expanduser(f"~/{CONFIG_FILENAME}"),
    ]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def load_settings(config_path: str | None = None) -> Settings:
    """Load settings from TOML, falling back to defaults.

    Args:
        config_path: Path to getpixels.toml (auto-detected if None)

    Returns:
        Validated Settings

    Raises:
        FileNotFoundError: If an explicit or env-provided path does not exist
        TOMLDecodeError: If the file is not valid TOML
        pydantic.ValidationError: If the file holds invalid values
    """
    resolved_path = _resolve_config_path(config_path)
    if resolved_path is None:
        return Settings()
    if not os.path.exists(resolved_path):
        raise FileNotFoundError(
            f"Config file not found at {resolved_path}. Set {CONFIG_ENV} or create {CONFIG_FILENAME}"
        )
    with open(resolved_path, "rb") as f:
        config = cast(dict[str, Any], tomllib.load(f))
    return Settings(**config.get("getpixels", {}))
