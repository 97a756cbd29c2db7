"""Typed release configuration.

Two sources, both read once at startup and passed explicitly afterwards:

- ``ReleaseSecrets``: signing and notarization credentials from the
  environment. Validated in full before any stage runs.
- ``ProjectSettings``: non-secret project constants, optionally overridden by
  ``charship.toml`` at the project root.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "ConfigError",
    "ProjectSettings",
    "ReleaseSecrets",
    "REQUIRED_ENV",
    "REQUIRED_ENV_NOTE",
    "SETTINGS_FILE",
    "load_release_secrets",
    "load_settings",
]

SETTINGS_FILE = "charship.toml"

REQUIRED_ENV: tuple[str, ...] = (
    "DEV_ID_APPLICATION",
    "AC_API_KEY_ID",
    "AC_API_KEY",
    "SPARKLE_PRIVATE_KEY",
)

REQUIRED_ENV_NOTE = """Required env vars:
- DEV_ID_APPLICATION: Codesigns the app bundle and DMG.
- AC_API_KEY_ID / AC_API_KEY: App Store Connect API key for notarization.
- AC_API_ISSUER_ID (optional): Needed for Team API keys.
- SPARKLE_PRIVATE_KEY: Base64 key from Sparkle keychain item (no quotes)."""


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when configuration is missing or cannot be parsed."""

    message: str
    path: Path | None = None
    missing: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReleaseSecrets:
    """Credentials needed by the release pipeline.

    Key material is excluded from repr so it never ends up in tracebacks.
    """

    signing_identity: str
    api_key_id: str
    api_key: str = field(repr=False)
    sparkle_private_key: str = field(repr=False)
    api_issuer_id: str | None = None
    sparkle_bin: Path | None = None


def _env_value(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value


def load_release_secrets(environ: Mapping[str, str]) -> Result[ReleaseSecrets, ConfigError]:
    """Read and validate release credentials.

    Every missing required variable is reported, not just the first one.

    Args:
        environ: Environment mapping (usually ``os.environ``).

    Returns:
        Ok(ReleaseSecrets) when all required values are present,
        Err(ConfigError) listing every missing name otherwise.
    """
    missing = tuple(name for name in REQUIRED_ENV if _env_value(environ, name) is None)
    if missing:
        return Err(
            ConfigError(
                message=f"Missing {', '.join(missing)}",
                missing=missing,
            )
        )

    sparkle_bin = _env_value(environ, "SPARKLE_BIN")
    issuer = _env_value(environ, "AC_API_ISSUER_ID")
    return Ok(
        ReleaseSecrets(
            signing_identity=environ["DEV_ID_APPLICATION"],
            api_key_id=environ["AC_API_KEY_ID"],
            api_key=environ["AC_API_KEY"],
            sparkle_private_key=environ["SPARKLE_PRIVATE_KEY"],
            api_issuer_id=issuer.strip() if issuer else None,
            sparkle_bin=Path(sparkle_bin).expanduser() if sparkle_bin else None,
        )
    )


@dataclass(frozen=True, slots=True)
class ProjectSettings:
    """Project constants used to derive build commands and artifact paths."""

    name: str = "char"
    scheme: str = "char"
    configuration: str = "Release"
    destination: str = "platform=macOS,arch=arm64"
    framework: str = "Sparkle"
    install_hint: str = "brew install sparkle"

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ProjectSettings:
        """Create settings from a mapping (parsed TOML)."""
        project: StrDict = get_table(data, "project") or {}
        feed: StrDict = get_table(data, "feed") or {}
        defaults = cls()
        name = get_str(project, "name") or defaults.name

        return cls(
            name=name,
            scheme=get_str(project, "scheme") or name,
            configuration=get_str(project, "configuration") or defaults.configuration,
            destination=get_str(project, "destination") or defaults.destination,
            framework=get_str(feed, "framework") or defaults.framework,
            install_hint=get_str(feed, "install_hint") or defaults.install_hint,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_settings(path: Path) -> Result[ProjectSettings, ConfigError]:
    """Load project settings, falling back to defaults if the file is absent.

    Args:
        path: Path to charship.toml

    Returns:
        Ok(ProjectSettings) on success, Err(ConfigError) on a bad file
    """
    if not path.exists():
        return Ok(ProjectSettings())

    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(ProjectSettings.from_dict(result.value))
