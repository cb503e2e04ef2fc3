from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..util import git_output, remove_path, run_git
from .models import RepoRef

LOGGER = logging.getLogger(__name__)


class Workspace:
    """Ephemeral local state for one watcher run.

    Holds the code clone, the lazily materialized report clone and a scratch
    directory for per-commit worktrees and gate output. Everything lives under
    one temporary root that ``cleanup`` removes.
    """

    def __init__(self, code_repo: RepoRef, report_repo: RepoRef, root: Path | None = None) -> None:
        self.code_repo = code_repo
        self.report_repo = report_repo
        self.root = Path(root) if root is not None else Path(tempfile.mkdtemp(prefix="commit_watch_"))
        self.code_dir = self.root / "code"
        self.report_dir = self.root / "report"
        self.scratch_dir = self.root / "scratch"
        self.scratch_dir.mkdir(parents=True, exist_ok=True)

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup()

    def clone_code(self, branch: str) -> str:
        if not (self.code_dir / ".git").exists():
            LOGGER.info("Cloning %s into %s", self.code_repo.url, self.code_dir)
            run_git(["clone", self.code_repo.url, str(self.code_dir)])
        run_git(["switch", branch], cwd=self.code_dir)
        return git_output(["rev-parse", "HEAD"], cwd=self.code_dir)

    def ensure_report_clone(self) -> Path:
        if (self.report_dir / ".git").exists():
            LOGGER.debug("Reusing report clone at %s", self.report_dir)
            return self.report_dir
        LOGGER.info("Cloning %s into %s", self.report_repo.url, self.report_dir)
        run_git(["clone", self.report_repo.url, str(self.report_dir)])
        return self.report_dir

    def scratch_path(self, prefix: str) -> Path:
        return Path(tempfile.mkdtemp(prefix=prefix, dir=self.scratch_dir))

    @contextmanager
    def worktree(self, commit_hash: str) -> Iterator[Path]:
        path = self.scratch_dir / f"worktree-{commit_hash[:12]}"
        run_git(["worktree", "add", "--detach", str(path), commit_hash], cwd=self.code_dir)
        try:
            yield path
        finally:
            result = run_git(["worktree", "remove", "--force", str(path)], cwd=self.code_dir, check=False)
            if result.returncode != 0:
                LOGGER.warning("git worktree remove failed for %s: %s", path, result.stderr.strip())
                remove_path(path)
                run_git(["worktree", "prune"], cwd=self.code_dir, check=False)

    def cleanup(self) -> None:
        if remove_path(self.root):
            LOGGER.info("Removed workspace %s", self.root)
