from __future__ import annotations

from pathlib import Path

import pytest

from commit_watch.errors import PreconditionError
from commit_watch.repo import RepoRef, preflight
from commit_watch.repo.preflight import check_repository, check_token, check_tools


def test_missing_token_is_fatal() -> None:
    with pytest.raises(PreconditionError, match="GITHUB_PERSONAL_ACCESS_TOKEN"):
        check_token("")


def test_existing_repository_and_branch_pass(code_remote) -> None:
    check_repository(RepoRef.parse(code_remote.url), "main")


def test_missing_branch_is_fatal(code_remote) -> None:
    with pytest.raises(PreconditionError, match="Branch 'nope' does not exist"):
        check_repository(RepoRef.parse(code_remote.url), "nope")


def test_unreachable_repository_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(PreconditionError, match="does not exist or is unreachable"):
        check_repository(RepoRef.parse(str(tmp_path / "missing" / "repo.git")), "main")


def test_missing_tool_is_fatal(monkeypatch) -> None:
    class _Result:
        def __init__(self, returncode: int) -> None:
            self.returncode = returncode

    def fake_run(cmd, **kwargs):
        return _Result(1 if "black" in cmd else 0)

    monkeypatch.setattr(preflight.subprocess, "run", fake_run)
    with pytest.raises(PreconditionError, match="black is not installed"):
        check_tools()
