"""Capabilities the pipeline needs from external tools.

The pipeline only talks to these protocols. ``tools.py`` implements them on
top of the real macOS toolchain; tests substitute recording fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from charship.core.result import Result
from charship.release.errors import ReleaseError

if TYPE_CHECKING:
    from charship.core.config import ProjectSettings
    from charship.release.layout import ArtifactLayout
    from charship.release.notary import NotaryCredentials


class AppBuilder(Protocol):
    def build(
        self, settings: ProjectSettings, layout: ArtifactLayout, identity: str
    ) -> Result[None, ReleaseError]: ...


class Signer(Protocol):
    def sign(
        self,
        target: Path,
        *,
        identity: str,
        hardened_runtime: bool = True,
        entitlements: Path | None = None,
    ) -> Result[None, ReleaseError]:
        """Code-sign target (always --force and --timestamp)."""
        ...


class ArchiveBuilder(Protocol):
    def zip_bundle(self, app: Path, zip_path: Path) -> Result[None, ReleaseError]: ...

    def create_disk_image(
        self, volume_name: str, source_dir: Path, dmg_path: Path
    ) -> Result[None, ReleaseError]: ...


class Notarizer(Protocol):
    def submit(
        self, artifact: Path, credentials: NotaryCredentials
    ) -> Result[str, ReleaseError]:
        """Submit and wait; returns the raw JSON verdict."""
        ...

    def staple(self, target: Path) -> Result[None, ReleaseError]: ...


class FeedPublisher(Protocol):
    def sign_update(self, artifact: Path, key_file: Path) -> Result[str, ReleaseError]:
        """Sign an update archive; returns the signature text."""
        ...

    def generate_appcast(
        self, key_file: Path, appcast: Path, release_dir: Path
    ) -> Result[None, ReleaseError]: ...


class FeedLocator(Protocol):
    def locate(self) -> Result[FeedPublisher, ReleaseError]: ...


@dataclass(frozen=True, slots=True)
class Toolbox:
    """One implementation of every capability."""

    builder: AppBuilder
    signer: Signer
    archiver: ArchiveBuilder
    notarizer: Notarizer
    feed: FeedLocator
