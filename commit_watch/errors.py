from __future__ import annotations


class CommitWatchError(RuntimeError):
    pass


class PreconditionError(CommitWatchError):
    pass


class GitCommandError(CommitWatchError):
    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        super().__init__(f"{' '.join(command)} failed ({returncode}): {self.stderr}")


class HistoryRewriteError(CommitWatchError):
    def __init__(self, old_hash: str, new_hash: str) -> None:
        self.old_hash = old_hash
        self.new_hash = new_hash
        super().__init__(f"{old_hash} is not an ancestor of {new_hash}; branch history was rewritten")


class PublishError(CommitWatchError):
    def __init__(self, commit_hash: str, message: str) -> None:
        self.commit_hash = commit_hash
        super().__init__(f"Publishing reports for {commit_hash} failed: {message}")
