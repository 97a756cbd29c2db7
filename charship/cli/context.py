from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from charship.core.config import SETTINGS_FILE, ProjectSettings, load_settings
from charship.core.errors import ErrorCode
from charship.core.result import Err
from charship.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    settings: ProjectSettings
    console: ConsoleProtocol


def build_context(root: Path | None = None, config: Path | None = None) -> CLIContext:
    """Resolve the project root and load charship.toml (if any)."""
    console = RichConsole()
    try:
        project_root = (root or Path.cwd()).expanduser().resolve()
    except OSError as e:
        console.error(f"invalid --root: {e}")
        raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))

    if not project_root.is_dir():
        console.error(f"project root not found: {project_root}")
        raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))

    settings_path = config if config is not None else project_root / SETTINGS_FILE
    settings_result = load_settings(settings_path)
    if isinstance(settings_result, Err):
        console.error(settings_result.error.message)
        raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))

    return CLIContext(root=project_root, settings=settings_result.value, console=console)
