from __future__ import annotations

import os
from pathlib import Path

import typer

from charship.cli.commands._helpers import exit_with_error, print_release_error
from charship.cli.context import build_context
from charship.core.config import load_release_secrets
from charship.core.errors import ErrorCode
from charship.core.result import Err
from charship.output.console import Style
from charship.platform.paths import user_bin_dir
from charship.release.errors import config_failure
from charship.release.feed import find_feed_tools
from charship.release.layout import ArtifactLayout
from charship.release.pipeline import release as run_release

ROOT_OPTION = typer.Option(None, "--root", help="Project root (default: current directory)")
CONFIG_OPTION = typer.Option(None, "--config", help="Settings file (default: <root>/charship.toml)")


def release(
    root: Path | None = ROOT_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Build, sign, notarize and publish a release."""
    ctx = build_context(root, config)

    result = run_release(
        root=ctx.root,
        settings=ctx.settings,
        environ=os.environ,
        console=ctx.console,
    )
    if isinstance(result, Err):
        exit_with_error(result.error, ctx.console)

    summary = result.value
    if summary.signature:
        ctx.console.print(f"Signature: {summary.signature}")
    ctx.console.success(f"Release artifacts ready in {summary.release_dir}")
    ctx.console.print(f"- {summary.dmg.name}")
    ctx.console.print(f"- {summary.appcast.name}")


def check(
    root: Path | None = ROOT_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Validate release configuration without running any tool."""
    ctx = build_context(root, config)
    console = ctx.console
    failed = False

    console.print(f"project: {ctx.settings.name} ({ctx.settings.configuration})", Style.DIM)
    console.print(f"root: {ctx.root}", Style.DIM)

    console.header("Credentials")
    secrets = load_release_secrets(os.environ)
    override: Path | None = None
    if isinstance(secrets, Err):
        print_release_error(config_failure(secrets.error), console)
        failed = True
        sparkle_bin = os.environ.get("SPARKLE_BIN", "").strip()
        override = Path(sparkle_bin).expanduser() if sparkle_bin else None
    else:
        console.success("required env vars present")
        if secrets.value.api_issuer_id is None:
            console.print("AC_API_ISSUER_ID not set (only needed for Team API keys)", Style.DIM)
        override = secrets.value.sparkle_bin

    console.header("Artifacts")
    layout = ArtifactLayout.for_project(ctx.root, ctx.settings)
    for label, path in layout.describe():
        console.print(f"{label}: {path}", Style.DIM)

    console.header("Sparkle")
    tools = find_feed_tools(
        override=override,
        user_bin=user_bin_dir(),
        install_hint=ctx.settings.install_hint,
    )
    if isinstance(tools, Err):
        print_release_error(tools.error, console)
        failed = True
    else:
        console.success(f"sign_update: {tools.value.sign_update}")
        console.success(f"generate_appcast: {tools.value.generate_appcast}")

    if failed:
        raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))
