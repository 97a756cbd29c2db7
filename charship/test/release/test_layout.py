from __future__ import annotations

from pathlib import Path

from charship.core.config import ProjectSettings
from charship.release.layout import ArtifactLayout


def test_default_project_paths() -> None:
    layout = ArtifactLayout.for_project(Path("/work/char"), ProjectSettings())
    build = Path("/work/char/build")

    assert layout.xcodeproj == "char.xcodeproj"
    assert layout.built_app == build / "DerivedData" / "Build" / "Products" / "Release" / "char.app"
    assert layout.app == build / "char.app"
    assert layout.app_zip == build / "char.zip"
    assert layout.dmg == build / "char.dmg"
    assert layout.dmg_staging == build / "dmg"
    assert layout.entitlements == build / "release-entitlements.plist"
    assert layout.released_dmg == build / "release" / "char.dmg"
    assert layout.appcast == build / "release" / "appcast.xml"


def test_paths_follow_settings() -> None:
    settings = ProjectSettings(name="scribe", configuration="Beta")
    layout = ArtifactLayout.for_project(Path("/p"), settings)

    assert layout.built_app.parent.name == "Beta"
    assert layout.built_app.name == "scribe.app"
    assert layout.released_dmg.name == "scribe.dmg"


def test_describe_covers_outputs() -> None:
    layout = ArtifactLayout.for_project(Path("/p"), ProjectSettings())
    labels = dict(layout.describe())

    assert labels["disk image"] == layout.dmg
    assert labels["release"] == layout.release_dir
