"""Core types: results, exit codes, configuration."""

from .config import (
    ConfigError,
    ProjectSettings,
    ReleaseSecrets,
    load_release_secrets,
    load_settings,
)
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "ProjectSettings",
    "ReleaseSecrets",
    "load_release_secrets",
    "load_settings",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
