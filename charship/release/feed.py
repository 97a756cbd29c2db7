"""Sparkle toolset discovery.

``sign_update`` and ``generate_appcast`` ship with Sparkle but are not on
PATH by default. Candidates are probed in order:

1. ``SPARKLE_BIN`` override
2. ``~/.local/bin``
3. Homebrew cask installs, newest version first
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from charship.core.result import Err, Ok, Result
from charship.release.errors import ReleaseError

SIGN_UPDATE = "sign_update"
GENERATE_APPCAST = "generate_appcast"

CASK_ROOTS: tuple[Path, ...] = (
    Path("/opt/homebrew/Caskroom/sparkle"),
    Path("/usr/local/Caskroom/sparkle"),
)

_DIGITS = re.compile(r"(\d+)")


@dataclass(frozen=True, slots=True)
class FeedTools:
    sign_update: Path
    generate_appcast: Path


def _version_key(name: str) -> tuple[tuple[int, int | str], ...]:
    # "2.10.0" > "2.9.0"; numeric runs compare as numbers
    parts = _DIGITS.split(name)
    return tuple((0, int(p)) if p.isdigit() else (1, p) for p in parts if p)


def _cask_bins(root: Path) -> list[Path]:
    try:
        versions = [p.name for p in root.iterdir() if p.is_dir()]
    except OSError:
        return []
    versions.sort(key=_version_key, reverse=True)
    return [root / v / "bin" for v in versions]


def candidate_dirs(
    *,
    override: Path | None,
    user_bin: Path,
    cask_roots: Iterable[Path] = CASK_ROOTS,
) -> list[Path]:
    """Directories to probe, in priority order."""
    out: list[Path] = []
    if override is not None:
        out.append(override)
    out.append(user_bin)
    for root in cask_roots:
        out += _cask_bins(root)
    return out


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def tools_in(directory: Path) -> FeedTools | None:
    """Return the toolset if directory holds both executables."""
    sign = directory / SIGN_UPDATE
    appcast = directory / GENERATE_APPCAST
    if _is_executable(sign) and _is_executable(appcast):
        return FeedTools(sign_update=sign, generate_appcast=appcast)
    return None


def find_feed_tools(
    *,
    override: Path | None,
    user_bin: Path,
    cask_roots: Iterable[Path] = CASK_ROOTS,
    install_hint: str = "brew install sparkle",
) -> Result[FeedTools, ReleaseError]:
    candidates = candidate_dirs(override=override, user_bin=user_bin, cask_roots=cask_roots)
    for directory in candidates:
        tools = tools_in(directory)
        if tools is not None:
            return Ok(tools)

    return Err(
        ReleaseError(
            kind="feed_tools_missing",
            message="Missing Sparkle tools",
            hint=f"Install with: {install_hint}",
            details=tuple(str(p) for p in candidates),
        )
    )
