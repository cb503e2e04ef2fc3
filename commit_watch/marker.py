from __future__ import annotations

import logging
from pathlib import Path

from .repo.models import CommitRecord
from .util import run_git

LOGGER = logging.getLogger(__name__)


class OutcomeMarker:
    def __init__(self, code_dir: Path, branch: str, remote: str = "origin") -> None:
        self.code_dir = code_dir
        self.branch = branch
        self.remote = remote

    @property
    def tag(self) -> str:
        return f"{self.branch}-result-successful"

    def mark_success(self, commit: CommitRecord) -> None:
        run_git(["tag", "--force", self.tag, commit.hash], cwd=self.code_dir)
        run_git(["push", "--force", self.remote, f"refs/tags/{self.tag}"], cwd=self.code_dir)
        LOGGER.info("Moved %s to %s", self.tag, commit.short_hash)
