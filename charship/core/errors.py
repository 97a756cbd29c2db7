"""Process exit codes.

The release tool has a deliberately small contract with its callers (CI jobs,
shell wrappers): zero when the release artifacts are ready, one otherwise.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable.
    - 0: Release (or check) completed
    - 1: Any failure: missing configuration, failed tool, rejected
         notarization, missing update-feed tools
    """

    OK = 0
    RELEASE_FAILED = 1
