from __future__ import annotations

import logging
from pathlib import Path

from ..util import git_output, run_git
from .models import BranchPointer

LOGGER = logging.getLogger(__name__)


class RemotePoller:
    def __init__(self, code_dir: Path, pointer: BranchPointer) -> None:
        self.code_dir = code_dir
        self.pointer = pointer

    def poll(self, last_known_hash: str) -> str:
        """Fetch the tracked branch and return its tip.

        Returns ``last_known_hash`` unchanged when nothing new arrived. Network
        failures propagate as ``GitCommandError``.
        """
        run_git(["fetch", "origin", self.pointer.branch], cwd=self.code_dir)
        tip = git_output(["rev-parse", "FETCH_HEAD"], cwd=self.code_dir)
        if tip != last_known_hash:
            LOGGER.info("%s advanced %s -> %s", self.pointer.branch, last_known_hash[:7], tip[:7])
        return tip
