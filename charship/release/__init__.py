"""Release pipeline for the char macOS app.

- capabilities: protocols for the external toolchain
- tools: real adapters (xcodebuild, codesign, ditto, hdiutil, notarytool, Sparkle)
- stages: one function per pipeline step
- pipeline: the fail-fast driver
"""

from __future__ import annotations

from .errors import ReleaseError
from .layout import ArtifactLayout
from .pipeline import ReleaseSummary, release, run_pipeline

__all__ = [
    "ArtifactLayout",
    "ReleaseError",
    "ReleaseSummary",
    "release",
    "run_pipeline",
]
