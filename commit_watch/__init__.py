from .config import Config
from .errors import (
    CommitWatchError,
    GitCommandError,
    HistoryRewriteError,
    PreconditionError,
    PublishError,
)

__all__ = [
    "Config",
    "CommitWatchError",
    "GitCommandError",
    "HistoryRewriteError",
    "PreconditionError",
    "PublishError",
]
