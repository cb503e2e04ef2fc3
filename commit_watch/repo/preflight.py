from __future__ import annotations

import subprocess
import sys

from ..errors import PreconditionError
from ..util import run_git
from .models import RepoRef

REQUIRED_TOOLS = {
    "pytest": [sys.executable, "-m", "pytest", "--version"],
    "pytest-html": [sys.executable, "-c", "import pytest_html"],
    "black": [sys.executable, "-m", "black", "--version"],
}


def check_token(token: str | None) -> None:
    if not token:
        raise PreconditionError("GITHUB_PERSONAL_ACCESS_TOKEN environment variable is missing!")


def check_repository(repo: RepoRef, branch: str) -> None:
    if run_git(["ls-remote", "--exit-code", repo.url], check=False).returncode != 0:
        raise PreconditionError(f"Repository {repo.url} does not exist or is unreachable")
    if run_git(["ls-remote", "--exit-code", "--heads", repo.url, branch], check=False).returncode != 0:
        raise PreconditionError(f"Branch '{branch}' does not exist in {repo.url}")


def check_tools() -> None:
    for name, command in REQUIRED_TOOLS.items():
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except FileNotFoundError:
            raise PreconditionError(f"{name} is not installed") from None
        if result.returncode != 0:
            raise PreconditionError(f"{name} is not installed")


def run_preflight(
    token: str | None,
    code_repo: RepoRef,
    code_branch: str,
    report_repo: RepoRef,
    report_branch: str,
) -> None:
    check_token(token)
    check_repository(code_repo, code_branch)
    check_repository(report_repo, report_branch)
    check_tools()
