from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..errors import GitCommandError

LOGGER = logging.getLogger(__name__)


def run_git(args: list[str], cwd: Path | str | None = None, check: bool = True) -> subprocess.CompletedProcess:
    command = ["git", *args]
    LOGGER.debug("Running %s (cwd=%s)", " ".join(command), cwd)
    result = subprocess.run(
        command,
        cwd=cwd,
        capture_output=True,
        text=True,
    )
    if check and result.returncode != 0:
        raise GitCommandError(command, result.returncode, result.stderr)
    return result


def git_output(args: list[str], cwd: Path | str | None = None) -> str:
    return run_git(args, cwd=cwd).stdout.strip()
