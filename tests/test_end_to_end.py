from __future__ import annotations

import json
import subprocess
from pathlib import Path

import httpx

from commit_watch.config import Config
from commit_watch.notify import GitHubClient
from commit_watch.pipeline import build_watcher
from commit_watch.repo import RepoRef, Workspace
from conftest import git

REAL_RUN = subprocess.run

DIFF = "--- a.py\n+++ a.py\n@@ -1 +1 @@\n-x=1\n+x = 1\n"


class _Result:
    def __init__(self, returncode: int, stdout: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = ""


def _install_fake_tools(monkeypatch, outcomes: dict) -> None:
    def fake_run(cmd, **kwargs):
        if cmd[0] == "git":
            return REAL_RUN(cmd, **kwargs)
        worktree = Path(kwargs["cwd"]).name
        test_code, format_code = next(codes for prefix, codes in outcomes.items() if worktree.endswith(prefix[:12]))
        if "pytest" in cmd:
            report = next(arg for arg in cmd if arg.startswith("--html=")).split("=", 1)[1]
            Path(report).write_text(f"<html>{worktree}</html>", encoding="utf-8")
            return _Result(test_code)
        return _Result(format_code, DIFF if format_code else "")

    monkeypatch.setattr(subprocess, "run", fake_run)


def _github(calls: list) -> GitHubClient:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == "/search/users":
            return httpx.Response(200, json={"total_count": 1, "items": [{"login": "dev"}]})
        return httpx.Response(201, json={"html_url": "https://github.com/code/code/issues/1"})

    return GitHubClient("token", "https://api.example.test", http_client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_watch_cycle_publishes_reports_files_issue_and_moves_tag(
    tmp_path: Path, monkeypatch, code_remote, report_remote
) -> None:
    code_remote.commit("a.py", "x = 1\n")
    workspace = Workspace(RepoRef.parse(code_remote.url), RepoRef.parse(report_remote.url), root=tmp_path / "ws")
    calls: list = []
    config = Config(token="token", state_file=str(tmp_path / "cursor.json"), poll_interval=0)
    watcher = build_watcher(config, workspace, _github(calls), "main", "gh-pages")

    good = code_remote.commit("b.py", "y = 2\n")
    bad = code_remote.commit("a.py", "x=1\n")
    _install_fake_tools(monkeypatch, {good: (0, 0), bad: (0, 1)})

    outcomes = watcher.poll_once()

    assert [outcome.commit.hash for outcome in outcomes] == [good, bad]
    assert outcomes[0].marked and outcomes[0].issue_url is None
    assert not outcomes[1].marked
    assert outcomes[1].issue_url == "https://github.com/code/code/issues/1"

    assert code_remote.remote_ref("refs/tags/main-result-successful") == good

    [issue_request] = [call for call in calls if call.method == "POST"]
    assert issue_request.url.path == "/repos/code/code/issues"
    payload = json.loads(issue_request.content)
    assert payload["title"] == f"{bad[:7]} failed formatting test."
    assert payload["labels"] == ["res_black"]
    assert payload["assignees"] == ["dev"]
    assert "/pytest.html" in payload["body"] and "/black.html" in payload["body"]
    assert "https://reports.github.io/reports/" in payload["body"]

    tree = git(report_remote.bare, "ls-tree", "-r", "--name-only", "gh-pages").splitlines()
    assert any(name.startswith(good) and name.endswith("/pytest.html") for name in tree)
    assert not any(name.startswith(good) and name.endswith("/black.html") for name in tree)
    assert any(name.startswith(bad) and name.endswith("/black.html") for name in tree)

    worktrees = git(workspace.code_dir, "worktree", "list").splitlines()
    assert len(worktrees) == 1
    assert json.loads((tmp_path / "cursor.json").read_text())[f"{code_remote.url}#main"]["commit"] == bad

    assert watcher.poll_once() == []
    workspace.cleanup()
    assert not workspace.root.exists()


def test_restart_resumes_after_cursor(tmp_path: Path, monkeypatch, code_remote, report_remote) -> None:
    first = code_remote.commit("a.py", "x = 1\n")
    state_file = tmp_path / "cursor.json"
    state_file.write_text(
        json.dumps({f"{code_remote.url}#main": {"commit": code_remote.head()}}),
        encoding="utf-8",
    )
    second = code_remote.commit("b.py", "y = 2\n")
    # the cursor points at `first`, so only `second` is new even though the clone starts at `second`
    workspace = Workspace(RepoRef.parse(code_remote.url), RepoRef.parse(report_remote.url), root=tmp_path / "ws")
    config = Config(token="token", state_file=str(state_file), poll_interval=0)
    watcher = build_watcher(config, workspace, _github([]), "main", "gh-pages")
    assert watcher.pointer.commit_hash == first
    _install_fake_tools(monkeypatch, {second: (0, 0)})

    outcomes = watcher.poll_once()

    assert [outcome.commit.hash for outcome in outcomes] == [second]
    workspace.cleanup()
