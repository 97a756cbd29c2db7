"""User-level path lookups."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

__all__ = ["home", "user_bin_dir", "clear_caches"]


@lru_cache(maxsize=1)
def home() -> Path:
    """Get the user's home directory.

    HOME wins over Path.home() so CI and tests can relocate it.
    """
    home_env = os.environ.get("HOME")
    if home_env:
        return Path(home_env)
    return Path.home()


def user_bin_dir() -> Path:
    """User-local binary directory (~/.local/bin)."""
    return home() / ".local" / "bin"


def clear_caches() -> None:
    """Clear cached paths.

    Useful for testing when environment variables change.
    """
    home.cache_clear()
