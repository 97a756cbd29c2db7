"""Error type for the release pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from charship.core.config import REQUIRED_ENV_NOTE, ConfigError
from charship.platform.process import ProcessError

ReleaseErrorKind = Literal[
    "config_missing",
    "config_invalid",
    "process_failed",
    "artifact_missing",
    "notary_rejected",
    "notary_output_invalid",
    "feed_tools_missing",
    "io_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    Every stage failure is reported in this shape so the CLI can render it
    without knowing which stage produced it.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    details: tuple[str, ...] = ()


def process_failure(error: ProcessError) -> ReleaseError:
    return ReleaseError(
        kind="process_failed",
        message=f"Command failed: {error.program} (exit {error.returncode})",
        hint=error.stderr.strip() or None,
    )


def io_failure(action: str, error: OSError) -> ReleaseError:
    return ReleaseError(kind="io_failed", message=f"{action}: {error}")


def config_failure(error: ConfigError) -> ReleaseError:
    if error.missing:
        return ReleaseError(
            kind="config_missing",
            message=error.message,
            hint=REQUIRED_ENV_NOTE,
            details=error.missing,
        )
    return ReleaseError(
        kind="config_invalid",
        message=error.message,
        hint=str(error.path) if error.path else None,
    )
