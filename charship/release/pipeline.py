"""Release pipeline driver.

Runs ``RELEASE_STAGES`` in order and stops at the first failure. Whatever
the outcome, the cleanup stack is unwound before returning, so temporary
key material never outlives the run.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path

from charship.core.config import ProjectSettings, ReleaseSecrets, load_release_secrets
from charship.core.result import Err, Ok, Result
from charship.output.console import ConsoleProtocol
from charship.release.capabilities import Toolbox
from charship.release.errors import ReleaseError, config_failure, io_failure
from charship.release.layout import ArtifactLayout
from charship.release.stages import RELEASE_STAGES, Stage, StageContext
from charship.release.tools import default_toolbox

ToolboxFactory = Callable[[Path, ProjectSettings, ReleaseSecrets], Toolbox]


@dataclass(frozen=True, slots=True)
class ReleaseSummary:
    release_dir: Path
    dmg: Path
    appcast: Path
    signature: str | None
    stages: tuple[str, ...]


def _run_stages(
    ctx: StageContext, stages: Sequence[Stage], completed: list[str]
) -> Result[None, ReleaseError]:
    for stage in stages:
        ctx.console.info(stage.title)
        try:
            result = stage.run(ctx)
        except OSError as e:
            result = Err(io_failure(stage.title, e))
        if isinstance(result, Err):
            return result
        completed.append(stage.name)
    return Ok(None)


def _unwind(cleanup: ExitStack) -> Result[None, ReleaseError]:
    # ExitStack runs every callback even when an earlier one raises
    try:
        cleanup.close()
    except OSError as e:
        return Err(io_failure("Cleaning up", e))
    return Ok(None)


def run_pipeline(
    ctx: StageContext,
    stages: Sequence[Stage] = RELEASE_STAGES,
) -> Result[ReleaseSummary, ReleaseError]:
    """Run stages in order, then unwind the cleanup stack.

    The first stage failure wins over a cleanup failure.
    """
    completed: list[str] = []
    ctx.console.header(f"Releasing {ctx.settings.name}")

    try:
        outcome = _run_stages(ctx, stages, completed)
    finally:
        cleaned = _unwind(ctx.cleanup)
    if isinstance(outcome, Err):
        return outcome
    if isinstance(cleaned, Err):
        return cleaned

    return Ok(
        ReleaseSummary(
            release_dir=ctx.layout.release_dir,
            dmg=ctx.layout.released_dmg,
            appcast=ctx.layout.appcast,
            signature=ctx.signature,
            stages=tuple(completed),
        )
    )


def release(
    *,
    root: Path,
    settings: ProjectSettings,
    environ: Mapping[str, str],
    console: ConsoleProtocol,
    toolbox: ToolboxFactory = default_toolbox,
    stages: Sequence[Stage] = RELEASE_STAGES,
) -> Result[ReleaseSummary, ReleaseError]:
    """Validate configuration, then run the full release.

    Missing credentials are reported before any directory is created or any
    tool is spawned.
    """
    secrets = load_release_secrets(environ)
    if isinstance(secrets, Err):
        return Err(config_failure(secrets.error))

    ctx = StageContext(
        settings=settings,
        layout=ArtifactLayout.for_project(root, settings),
        secrets=secrets.value,
        tools=toolbox(root, settings, secrets.value),
        console=console,
    )
    return run_pipeline(ctx, stages)
