from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from charship.core.config import ProjectSettings

APPCAST_NAME = "appcast.xml"
ENTITLEMENTS_NAME = "release-entitlements.plist"


@dataclass(frozen=True, slots=True)
class ArtifactLayout:
    """Filesystem locations touched by a release run.

    Everything is derived from the project root and name, so two runs of the
    same project always use the same paths.
    """

    root: Path
    name: str
    configuration: str

    @classmethod
    def for_project(cls, root: Path, settings: ProjectSettings) -> ArtifactLayout:
        return cls(root=root, name=settings.name, configuration=settings.configuration)

    @property
    def build_dir(self) -> Path:
        return self.root / "build"

    @property
    def derived_data(self) -> Path:
        return self.build_dir / "DerivedData"

    @property
    def built_app(self) -> Path:
        """Where xcodebuild leaves the app for this configuration."""
        return self.derived_data / "Build" / "Products" / self.configuration / f"{self.name}.app"

    @property
    def xcodeproj(self) -> str:
        return f"{self.name}.xcodeproj"

    @property
    def app(self) -> Path:
        return self.build_dir / f"{self.name}.app"

    @property
    def app_zip(self) -> Path:
        return self.build_dir / f"{self.name}.zip"

    @property
    def dmg_name(self) -> str:
        return f"{self.name}.dmg"

    @property
    def dmg(self) -> Path:
        return self.build_dir / self.dmg_name

    @property
    def dmg_staging(self) -> Path:
        return self.build_dir / "dmg"

    @property
    def entitlements(self) -> Path:
        return self.build_dir / ENTITLEMENTS_NAME

    @property
    def release_dir(self) -> Path:
        return self.build_dir / "release"

    @property
    def released_dmg(self) -> Path:
        return self.release_dir / self.dmg_name

    @property
    def appcast(self) -> Path:
        return self.release_dir / APPCAST_NAME

    def describe(self) -> tuple[tuple[str, Path], ...]:
        """Label/path pairs for display."""
        return (
            ("build", self.build_dir),
            ("derived data", self.derived_data),
            ("app", self.app),
            ("zip", self.app_zip),
            ("disk image", self.dmg),
            ("release", self.release_dir),
        )
