from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from ..errors import GitCommandError, PublishError
from ..gates.models import FORMAT_GATE, TEST_GATE, GateResults
from ..repo.models import CommitRecord, RepoRef
from ..repo.workspace import Workspace
from ..util import run_git

LOGGER = logging.getLogger(__name__)

ARTIFACT_FILES = {
    TEST_GATE: "pytest.html",
    FORMAT_GATE: "black.html",
}


@dataclass(frozen=True)
class PublishedArtifact:
    commit_hash: str
    gate: str
    url: str


def report_url(repo: RepoRef, report_path: str, filename: str) -> str:
    return f"https://{repo.owner}.github.io/{repo.name}/{report_path}/{filename}"


class ReportPublisher:
    def __init__(
        self,
        workspace: Workspace,
        branch: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.workspace = workspace
        self.branch = branch
        self.clock = clock

    @property
    def repo(self) -> RepoRef:
        return self.workspace.report_repo

    def allocate_path(self, repo_dir: Path, commit_hash: str) -> str:
        base = f"{commit_hash}-{int(self.clock())}"
        candidate = base
        suffix = 1
        while (repo_dir / candidate).exists():
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def publish(self, commit: CommitRecord, results: GateResults) -> list[PublishedArtifact]:
        try:
            repo_dir = self.workspace.ensure_report_clone()
            run_git(["switch", self.branch], cwd=repo_dir)
            report_path = self.allocate_path(repo_dir, commit.hash)
            target = repo_dir / report_path
            target.mkdir(parents=True)

            written = [(TEST_GATE, results.test.artifact)]
            if results.format.has_artifact:
                written.append((FORMAT_GATE, results.format.artifact))
            for gate, content in written:
                (target / ARTIFACT_FILES[gate]).write_text(content, encoding="utf-8")

            run_git(["add", report_path], cwd=repo_dir)
            run_git(["commit", "-m", f"{commit.hash} report."], cwd=repo_dir)
            run_git(["push", "origin", self.branch], cwd=repo_dir)
        except (GitCommandError, OSError) as exc:
            raise PublishError(commit.hash, str(exc)) from exc

        LOGGER.info("Published %d report(s) for %s under %s", len(written), commit.short_hash, report_path)
        return [
            PublishedArtifact(
                commit_hash=commit.hash,
                gate=gate,
                url=report_url(self.repo, report_path, ARTIFACT_FILES[gate]),
            )
            for gate, _ in written
        ]
