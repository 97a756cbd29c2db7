"""Release stages, in execution order.

Every stage takes the shared ``StageContext`` and returns
``Result[None, ReleaseError]``. Stages that hold secrets or transient files
register their removal on ``ctx.cleanup`` so the driver can release them no
matter where the run stops.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass, field

from charship.core.config import ProjectSettings, ReleaseSecrets
from charship.core.result import Err, Ok, Result
from charship.output.console import ConsoleProtocol, Style
from charship.platform.files import remove_path, replace_tree, reset_dir, secret_dir, write_secret
from charship.release.capabilities import FeedPublisher, Toolbox
from charship.release.entitlements import write_entitlements
from charship.release.errors import ReleaseError
from charship.release.layout import ArtifactLayout
from charship.release.notary import KEY_FILE_NAME, NotaryCredentials, notarize_artifact

FEED_KEY_FILE_NAME = "sparkle_private_key"

# Relative to <Framework>.framework/Versions/B. Inner executables first, then
# the bundles that contain them.
FRAMEWORK_COMPONENTS: tuple[str, ...] = (
    "Updater.app/Contents/MacOS/Updater",
    "Autoupdate",
    "XPCServices/Downloader.xpc/Contents/MacOS/Downloader",
    "XPCServices/Installer.xpc/Contents/MacOS/Installer",
    "Updater.app",
    "XPCServices/Downloader.xpc",
    "XPCServices/Installer.xpc",
)


@dataclass
class StageContext:
    """Everything a stage may read, plus what earlier stages produced."""

    settings: ProjectSettings
    layout: ArtifactLayout
    secrets: ReleaseSecrets
    tools: Toolbox
    console: ConsoleProtocol
    cleanup: ExitStack = field(default_factory=ExitStack)

    credentials: NotaryCredentials | None = None
    feed: FeedPublisher | None = None
    signature: str | None = None

    def notary_credentials(self) -> NotaryCredentials:
        if self.credentials is None:
            raise RuntimeError("notary key requested before it was written")
        return self.credentials


StageFn = Callable[[StageContext], Result[None, ReleaseError]]


@dataclass(frozen=True, slots=True)
class Stage:
    name: str
    title: str
    run: StageFn


def _done[T](result: Result[T, ReleaseError]) -> Result[None, ReleaseError]:
    if isinstance(result, Err):
        return result
    return Ok(None)


def prepare_dirs(ctx: StageContext) -> Result[None, ReleaseError]:
    ctx.layout.build_dir.mkdir(parents=True, exist_ok=True)
    ctx.layout.release_dir.mkdir(parents=True, exist_ok=True)
    return Ok(None)


def write_notary_key(ctx: StageContext) -> Result[None, ReleaseError]:
    key_dir = ctx.cleanup.enter_context(secret_dir("notary"))
    key_path = key_dir / KEY_FILE_NAME
    write_secret(key_path, ctx.secrets.api_key)
    ctx.credentials = NotaryCredentials(
        key_path=key_path,
        key_id=ctx.secrets.api_key_id,
        issuer_id=ctx.secrets.api_issuer_id,
    )
    return Ok(None)


def build_app(ctx: StageContext) -> Result[None, ReleaseError]:
    return ctx.tools.builder.build(ctx.settings, ctx.layout, ctx.secrets.signing_identity)


def stage_app(ctx: StageContext) -> Result[None, ReleaseError]:
    """Copy the built app to its stable path, replacing any previous copy."""
    layout = ctx.layout
    built = layout.built_app
    if not built.exists():
        return Err(
            ReleaseError(
                kind="artifact_missing",
                message=f"Built app not found at {built}",
                hint=f"Check the '{ctx.settings.configuration}' build output",
            )
        )
    if not built.is_dir():
        return Err(ReleaseError(kind="artifact_missing", message=f"{built} is not a directory"))

    remove_path(layout.dmg)
    remove_path(layout.app_zip)
    replace_tree(built, layout.app)
    return Ok(None)


def materialize_entitlements(ctx: StageContext) -> Result[None, ReleaseError]:
    path = write_entitlements(ctx.layout.entitlements)
    ctx.cleanup.callback(remove_path, path)
    return Ok(None)


def sign_framework(ctx: StageContext) -> Result[None, ReleaseError]:
    """Sign the bundled update framework from the inside out.

    Components missing from this framework build are skipped.
    """
    framework = ctx.layout.app / "Contents" / "Frameworks" / f"{ctx.settings.framework}.framework"
    version_dir = framework / "Versions" / "B"

    targets = [version_dir / rel for rel in FRAMEWORK_COMPONENTS]
    targets.append(framework)
    for target in targets:
        if not target.exists():
            ctx.console.print(f"skip (absent): {target.relative_to(ctx.layout.app)}", Style.DIM)
            continue
        signed = ctx.tools.signer.sign(target, identity=ctx.secrets.signing_identity)
        if isinstance(signed, Err):
            return signed
    return Ok(None)


def sign_app(ctx: StageContext) -> Result[None, ReleaseError]:
    return ctx.tools.signer.sign(
        ctx.layout.app,
        identity=ctx.secrets.signing_identity,
        entitlements=ctx.layout.entitlements,
    )


def zip_app(ctx: StageContext) -> Result[None, ReleaseError]:
    return ctx.tools.archiver.zip_bundle(ctx.layout.app, ctx.layout.app_zip)


def notarize_app(ctx: StageContext) -> Result[None, ReleaseError]:
    return _done(
        notarize_artifact(
            ctx.layout.app_zip,
            label="app zip",
            notarizer=ctx.tools.notarizer,
            credentials=ctx.notary_credentials(),
            console=ctx.console,
        )
    )


def staple_app(ctx: StageContext) -> Result[None, ReleaseError]:
    stapled = ctx.tools.notarizer.staple(ctx.layout.app)
    if isinstance(stapled, Err):
        return stapled
    remove_path(ctx.layout.app_zip)
    return Ok(None)


def build_disk_image(ctx: StageContext) -> Result[None, ReleaseError]:
    layout = ctx.layout
    reset_dir(layout.dmg_staging)
    replace_tree(layout.app, layout.dmg_staging / layout.app.name)
    return ctx.tools.archiver.create_disk_image(ctx.settings.name, layout.dmg_staging, layout.dmg)


def sign_disk_image(ctx: StageContext) -> Result[None, ReleaseError]:
    return ctx.tools.signer.sign(
        ctx.layout.dmg,
        identity=ctx.secrets.signing_identity,
        hardened_runtime=False,
    )


def notarize_disk_image(ctx: StageContext) -> Result[None, ReleaseError]:
    return _done(
        notarize_artifact(
            ctx.layout.dmg,
            label="DMG",
            notarizer=ctx.tools.notarizer,
            credentials=ctx.notary_credentials(),
            console=ctx.console,
        )
    )


def staple_disk_image(ctx: StageContext) -> Result[None, ReleaseError]:
    return ctx.tools.notarizer.staple(ctx.layout.dmg)


def locate_feed_tools(ctx: StageContext) -> Result[None, ReleaseError]:
    located = ctx.tools.feed.locate()
    if isinstance(located, Err):
        return located
    ctx.feed = located.value
    return Ok(None)


def publish_feed(ctx: StageContext) -> Result[None, ReleaseError]:
    """Sign the disk image, publish it and regenerate the appcast.

    The private key only exists for the duration of this stage.
    """
    feed = ctx.feed
    if feed is None:
        raise RuntimeError("update feed tools requested before they were located")
    layout = ctx.layout

    with secret_dir("sparkle") as key_dir:
        key_file = key_dir / FEED_KEY_FILE_NAME
        write_secret(key_file, ctx.secrets.sparkle_private_key.strip())

        signed = feed.sign_update(layout.dmg, key_file)
        if isinstance(signed, Err):
            return signed

        layout.release_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy2(layout.dmg, layout.released_dmg)

        generated = feed.generate_appcast(key_file, layout.appcast, layout.release_dir)
        if isinstance(generated, Err):
            return generated

    ctx.signature = signed.value or None
    return Ok(None)


RELEASE_STAGES: tuple[Stage, ...] = (
    Stage("prepare", "Preparing build directories", prepare_dirs),
    Stage("notary-key", "Writing notarization key", write_notary_key),
    Stage("build", "Building app", build_app),
    Stage("stage-app", "Staging built app", stage_app),
    Stage("entitlements", "Writing entitlements", materialize_entitlements),
    Stage("sign-framework", "Signing update framework", sign_framework),
    Stage("sign-app", "Signing app bundle", sign_app),
    Stage("zip", "Archiving app", zip_app),
    Stage("notarize-app", "Notarizing app", notarize_app),
    Stage("staple-app", "Stapling app", staple_app),
    Stage("disk-image", "Creating disk image", build_disk_image),
    Stage("sign-disk-image", "Signing disk image", sign_disk_image),
    Stage("notarize-disk-image", "Notarizing disk image", notarize_disk_image),
    Stage("staple-disk-image", "Stapling disk image", staple_disk_image),
    Stage("locate-feed-tools", "Locating Sparkle tools", locate_feed_tools),
    Stage("publish-feed", "Publishing update feed", publish_feed),
)
