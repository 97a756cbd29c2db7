"""Result type for explicit error handling.

Release stages never raise for expected failures: every stage returns a
Result so the failure path is part of its signature.

Usage:
    def stage_app(ctx: StageContext) -> Result[None, ReleaseError]:
        if not built.is_dir():
            return Err(ReleaseError(kind="artifact_missing", message=...))
        return Ok(None)

    match stage_app(ctx):
        case Ok():
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

__all__ = ["Ok", "Err", "Result"]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply f to the contained value."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def map(self, f: Callable[[object], object]) -> Err[E]:
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
