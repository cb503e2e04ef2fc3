from __future__ import annotations

from pathlib import Path

import pytest

from commit_watch.errors import GitCommandError
from commit_watch.repo import BranchPointer, RemotePoller, RepoRef, Workspace
from conftest import git


def _workspace(tmp_path: Path, code_remote, report_remote) -> Workspace:
    return Workspace(RepoRef.parse(code_remote.url), RepoRef.parse(report_remote.url), root=tmp_path / "ws")


def test_poll_reports_unchanged_and_advanced_tips(tmp_path: Path, code_remote, report_remote) -> None:
    workspace = _workspace(tmp_path, code_remote, report_remote)
    head = workspace.clone_code("main")
    pointer = BranchPointer(workspace.code_repo, "main", head)
    poller = RemotePoller(workspace.code_dir, pointer)

    assert poller.poll(head) == head

    new_head = code_remote.commit("a.py", "a = 1\n")
    assert poller.poll(head) == new_head
    # fetched objects are available for sequencing
    assert git(workspace.code_dir, "cat-file", "-t", new_head) == "commit"


def test_poll_failure_propagates(tmp_path: Path, code_remote, report_remote) -> None:
    workspace = _workspace(tmp_path, code_remote, report_remote)
    head = workspace.clone_code("main")
    poller = RemotePoller(workspace.code_dir, BranchPointer(workspace.code_repo, "missing-branch", head))

    with pytest.raises(GitCommandError):
        poller.poll(head)


def test_workspace_cleanup_removes_clones(tmp_path: Path, code_remote, report_remote) -> None:
    workspace = _workspace(tmp_path, code_remote, report_remote)
    with workspace:
        workspace.clone_code("main")
        workspace.ensure_report_clone()
        assert workspace.code_dir.exists() and workspace.report_dir.exists()
    assert not workspace.root.exists()


def test_report_clone_is_reused(tmp_path: Path, code_remote, report_remote) -> None:
    workspace = _workspace(tmp_path, code_remote, report_remote)
    first = workspace.ensure_report_clone()
    marker = first / "local-only.txt"
    marker.write_text("kept", encoding="utf-8")
    assert workspace.ensure_report_clone() == first
    assert marker.exists()
