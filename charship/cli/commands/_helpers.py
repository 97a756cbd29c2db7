"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from charship.core.errors import ErrorCode
from charship.output.console import Style

if TYPE_CHECKING:
    from charship.output.console import ConsoleProtocol
    from charship.release.errors import ReleaseError


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Render a release error: message, details, then a dimmed hint."""
    console.error(error.message)
    if error.kind == "config_missing":
        for name in error.details:
            console.print(f"- {name}", Style.DIM)
    elif error.kind == "notary_rejected":
        for line in error.details:
            console.print(line, Style.DIM)
    elif error.kind == "feed_tools_missing":
        console.print("searched:", Style.DIM)
        for path in error.details:
            console.print(f"  {path}", Style.DIM)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def exit_with_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    print_release_error(error, console)
    raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))
