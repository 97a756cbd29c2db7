"""Adapters over the macOS release toolchain.

Each adapter turns one capability into concrete command lines and maps
process failures to ``ReleaseError``. Nothing here decides *when* a tool runs;
that is the pipeline's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from charship.core.config import ProjectSettings, ReleaseSecrets
from charship.core.result import Err, Ok, Result
from charship.platform.paths import user_bin_dir
from charship.platform.process import run as run_process
from charship.platform.process import run_streamed
from charship.release.capabilities import FeedPublisher, Toolbox
from charship.release.errors import ReleaseError, process_failure
from charship.release.feed import CASK_ROOTS, FeedTools, find_feed_tools
from charship.release.layout import ArtifactLayout
from charship.release.notary import NotaryCredentials

CODESIGN = "/usr/bin/codesign"
DITTO = "/usr/bin/ditto"


def _streamed(cmd: list[str], cwd: Path) -> Result[None, ReleaseError]:
    result = run_streamed(cmd, cwd=cwd)
    if isinstance(result, Err):
        return Err(process_failure(result.error))
    return Ok(None)


def _captured(cmd: list[str], cwd: Path) -> Result[str, ReleaseError]:
    result = run_process(cmd, cwd=cwd)
    if isinstance(result, Err):
        return Err(process_failure(result.error))
    return result


@dataclass(frozen=True, slots=True)
class XcodeBuilder:
    cwd: Path

    def build(
        self, settings: ProjectSettings, layout: ArtifactLayout, identity: str
    ) -> Result[None, ReleaseError]:
        cmd = [
            "xcodebuild",
            "-project",
            layout.xcodeproj,
            "-scheme",
            settings.scheme,
            "-configuration",
            settings.configuration,
            "-derivedDataPath",
            str(layout.derived_data),
            "-destination",
            settings.destination,
            f"CODE_SIGN_IDENTITY={identity}",
            "CODE_SIGN_STYLE=Manual",
            "build",
        ]
        return _streamed(cmd, self.cwd)


@dataclass(frozen=True, slots=True)
class Codesign:
    cwd: Path

    def sign(
        self,
        target: Path,
        *,
        identity: str,
        hardened_runtime: bool = True,
        entitlements: Path | None = None,
    ) -> Result[None, ReleaseError]:
        cmd = [CODESIGN, "--force"]
        if hardened_runtime:
            cmd += ["--options", "runtime"]
        cmd.append("--timestamp")
        if entitlements is not None:
            cmd += ["--entitlements", str(entitlements)]
        cmd += ["--sign", identity, str(target)]
        return _streamed(cmd, self.cwd)


@dataclass(frozen=True, slots=True)
class DiskTools:
    cwd: Path

    def zip_bundle(self, app: Path, zip_path: Path) -> Result[None, ReleaseError]:
        # --keepParent keeps the .app directory entry so the zip unpacks to a bundle
        return _streamed([DITTO, "-c", "-k", "--keepParent", str(app), str(zip_path)], self.cwd)

    def create_disk_image(
        self, volume_name: str, source_dir: Path, dmg_path: Path
    ) -> Result[None, ReleaseError]:
        cmd = [
            "hdiutil",
            "create",
            "-volname",
            volume_name,
            "-srcfolder",
            str(source_dir),
            "-ov",
            "-format",
            "UDZO",
            str(dmg_path),
        ]
        return _streamed(cmd, self.cwd)


@dataclass(frozen=True, slots=True)
class NotaryTool:
    cwd: Path

    def submit(self, artifact: Path, credentials: NotaryCredentials) -> Result[str, ReleaseError]:
        cmd = [
            "xcrun",
            "notarytool",
            "submit",
            str(artifact),
            *credentials.auth_args(),
            "--wait",
            "--output-format",
            "json",
        ]
        return _captured(cmd, self.cwd)

    def staple(self, target: Path) -> Result[None, ReleaseError]:
        return _streamed(["xcrun", "stapler", "staple", str(target)], self.cwd)


@dataclass(frozen=True, slots=True)
class SparkleFeed:
    tools: FeedTools
    cwd: Path

    def sign_update(self, artifact: Path, key_file: Path) -> Result[str, ReleaseError]:
        cmd = [str(self.tools.sign_update), "-f", str(key_file), str(artifact)]
        result = _captured(cmd, self.cwd)
        return result.map(str.strip)

    def generate_appcast(
        self, key_file: Path, appcast: Path, release_dir: Path
    ) -> Result[None, ReleaseError]:
        cmd = [
            str(self.tools.generate_appcast),
            "--ed-key-file",
            str(key_file),
            "-o",
            str(appcast),
            str(release_dir),
        ]
        return _streamed(cmd, self.cwd)


@dataclass(frozen=True, slots=True)
class SparkleLocator:
    cwd: Path
    override: Path | None = None
    install_hint: str = "brew install sparkle"
    cask_roots: tuple[Path, ...] = CASK_ROOTS

    def locate(self) -> Result[FeedPublisher, ReleaseError]:
        found = find_feed_tools(
            override=self.override,
            user_bin=user_bin_dir(),
            cask_roots=self.cask_roots,
            install_hint=self.install_hint,
        )
        if isinstance(found, Err):
            return found
        return Ok(SparkleFeed(tools=found.value, cwd=self.cwd))


def default_toolbox(root: Path, settings: ProjectSettings, secrets: ReleaseSecrets) -> Toolbox:
    """Wire the real toolchain for a project rooted at root."""
    return Toolbox(
        builder=XcodeBuilder(cwd=root),
        signer=Codesign(cwd=root),
        archiver=DiskTools(cwd=root),
        notarizer=NotaryTool(cwd=root),
        feed=SparkleLocator(
            cwd=root,
            override=secrets.sparkle_bin,
            install_hint=settings.install_hint,
        ),
    )
