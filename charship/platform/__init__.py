"""Platform abstraction layer."""

from .files import (
    atomic_write_text,
    remove_path,
    replace_tree,
    reset_dir,
    secret_dir,
    write_secret,
)
from .paths import (
    home,
    user_bin_dir,
)
from .process import (
    ProcessError,
    run,
    run_streamed,
)

__all__ = [
    # files
    "atomic_write_text",
    "remove_path",
    "replace_tree",
    "reset_dir",
    "secret_dir",
    "write_secret",
    # paths
    "home",
    "user_bin_dir",
    # process
    "ProcessError",
    "run",
    "run_streamed",
]
