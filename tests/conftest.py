from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

AUTHOR_EMAIL = "ada@example.com"


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)
    return result.stdout.strip()


class GitRemote:
    """A bare repository plus a seed clone used to push new commits to it."""

    def __init__(self, root: Path, name: str, branch: str = "main") -> None:
        self.branch = branch
        self.bare = root / "remotes" / name / f"{name}.git"
        self.bare.mkdir(parents=True)
        git(self.bare, "init", "--bare", "-b", branch)
        self.seed = root / "seeds" / name
        self.seed.mkdir(parents=True)
        git(self.seed, "init", "-b", branch)
        git(self.seed, "remote", "add", "origin", str(self.bare))
        self.commit("README.md", "seed\n")

    @property
    def url(self) -> str:
        return str(self.bare)

    def commit(self, filename: str, content: str, email: str = AUTHOR_EMAIL, push: bool = True) -> str:
        path = self.seed / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        git(self.seed, "add", filename)
        git(self.seed, "-c", f"user.email={email}", "commit", "-m", f"update {filename}", "--author", f"Dev <{email}>")
        if push:
            self.push()
        return self.head()

    def push(self, force: bool = False) -> None:
        args = ["push", "origin", self.branch]
        if force:
            args.insert(1, "--force")
        git(self.seed, *args)

    def head(self) -> str:
        return git(self.seed, "rev-parse", "HEAD")

    def add_branch(self, branch: str) -> None:
        git(self.seed, "push", "origin", f"HEAD:refs/heads/{branch}")

    def remote_ref(self, ref: str) -> str:
        return git(self.bare, "rev-parse", ref)


@pytest.fixture(autouse=True)
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Dev")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", AUTHOR_EMAIL)
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Watcher")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "watcher@example.com")


@pytest.fixture
def code_remote(tmp_path: Path) -> GitRemote:
    return GitRemote(tmp_path, "code")


@pytest.fixture
def report_remote(tmp_path: Path) -> GitRemote:
    remote = GitRemote(tmp_path, "reports")
    remote.add_branch("gh-pages")
    return remote
