from __future__ import annotations

from pathlib import Path

from commit_watch.marker import OutcomeMarker
from commit_watch.repo import CommitRecord, RepoRef, Workspace
from conftest import git


def test_success_tag_is_force_moved(tmp_path: Path, code_remote, report_remote) -> None:
    workspace = Workspace(RepoRef.parse(code_remote.url), RepoRef.parse(report_remote.url), root=tmp_path / "ws")
    first = code_remote.commit("a.py", "a = 1\n")
    workspace.clone_code("main")
    marker = OutcomeMarker(workspace.code_dir, "main")

    marker.mark_success(CommitRecord(first, "dev@example.com", 0))
    assert marker.tag == "main-result-successful"
    assert code_remote.remote_ref("refs/tags/main-result-successful") == first

    second = code_remote.commit("b.py", "b = 1\n")
    git(workspace.code_dir, "fetch", "origin", "main")
    marker.mark_success(CommitRecord(second, "dev@example.com", 0))
    assert code_remote.remote_ref("refs/tags/main-result-successful") == second
    tags = git(code_remote.bare, "tag", "--list").splitlines()
    assert tags == ["main-result-successful"]
