from .logging import setup_logging
from .fs import ensure_dir, remove_path
from .git import run_git, git_output
from .timing import log_timing

__all__ = [
    "setup_logging",
    "ensure_dir",
    "remove_path",
    "run_git",
    "git_output",
    "log_timing",
]
