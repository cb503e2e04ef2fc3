from __future__ import annotations

import logging
import time
from typing import Callable

from ..config import Config
from ..errors import CommitWatchError, GitCommandError, HistoryRewriteError
from ..gates.runner import GateRunner
from ..marker import OutcomeMarker
from ..notify.github import GitHubClient
from ..notify.notifier import Notifier
from ..repo.cursor import CursorStore
from ..repo.models import BranchPointer
from ..repo.poller import RemotePoller
from ..repo.sequencer import CommitSequencer
from ..repo.workspace import Workspace
from ..report.publisher import ReportPublisher
from .stages import CommitPipeline, StageContext, default_stages

LOGGER = logging.getLogger(__name__)


class Watcher:
    def __init__(
        self,
        pointer: BranchPointer,
        poller: RemotePoller,
        sequencer: CommitSequencer,
        pipeline: CommitPipeline,
        cursor: CursorStore | None = None,
        on_rewrite: str = "fail",
        interval: float = 15.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.pointer = pointer
        self.poller = poller
        self.sequencer = sequencer
        self.pipeline = pipeline
        self.cursor = cursor
        self.on_rewrite = on_rewrite
        self.interval = interval
        self.sleep = sleep
        self._stopped = False

    def stop(self) -> None:
        self._stopped = True

    def check(self) -> str | None:
        """Poll the remote; return the new tip, or None when unchanged or unreachable."""
        try:
            tip = self.poller.poll(self.pointer.commit_hash)
        except GitCommandError as exc:
            LOGGER.warning("Poll of %s failed, retrying next cycle: %s", self.pointer.branch, exc)
            return None
        if tip == self.pointer.commit_hash:
            return None
        return tip

    def process(self, new_hash: str) -> list[StageContext]:
        old_hash = self.pointer.commit_hash
        try:
            commits = self.sequencer.sequence(old_hash, new_hash)
        except HistoryRewriteError:
            if self.on_rewrite != "reset":
                raise
            LOGGER.warning(
                "History of %s rewritten (%s -> %s); evaluating the new tip only",
                self.pointer.branch,
                old_hash[:7],
                new_hash[:7],
            )
            commits = self.sequencer.single(new_hash)
        LOGGER.info("%d new commit(s) on %s", len(commits), self.pointer.branch)
        self.pointer.advance(new_hash)

        outcomes: list[StageContext] = []
        for commit in commits:
            LOGGER.info("Evaluating %s (%d/%d)", commit.hash, commit.position + 1, len(commits))
            try:
                outcome = self.pipeline.run(commit)
            except CommitWatchError as exc:
                LOGGER.error("Evaluation of %s aborted: %s", commit.hash, exc)
                raise
            if self.cursor is not None:
                self.cursor.save(self.pointer, commit.hash)
            outcomes.append(outcome)
        return outcomes

    def poll_once(self) -> list[StageContext]:
        tip = self.check()
        if tip is None:
            return []
        return self.process(tip)

    def run_forever(self) -> None:
        LOGGER.info(
            "Watching %s@%s from %s every %.0fs",
            self.pointer.repo.url,
            self.pointer.branch,
            self.pointer.commit_hash[:7],
            self.interval,
        )
        while not self._stopped:
            self.poll_once()
            if self._stopped:
                break
            self.sleep(self.interval)


def build_watcher(
    config: Config,
    workspace: Workspace,
    client: GitHubClient,
    code_branch: str,
    report_branch: str,
) -> Watcher:
    head = workspace.clone_code(code_branch)
    pointer = BranchPointer(repo=workspace.code_repo, branch=code_branch, commit_hash=head)
    cursor = CursorStore(config.state_file) if config.state_file else None
    if cursor is not None:
        resumed = cursor.load(pointer)
        if resumed:
            LOGGER.info("Resuming %s after %s", code_branch, resumed[:7])
            pointer.advance(resumed)

    gate_runner = GateRunner(workspace, style=config.diff_style)
    publisher = ReportPublisher(workspace, report_branch)
    notifier = Notifier(
        client,
        workspace.code_repo,
        test_label=config.test_label,
        format_label=config.format_label,
        dedupe=config.dedupe_issues,
    )
    marker = OutcomeMarker(workspace.code_dir, code_branch)
    pipeline = CommitPipeline(default_stages(workspace, gate_runner, publisher, notifier, marker))
    return Watcher(
        pointer=pointer,
        poller=RemotePoller(workspace.code_dir, pointer),
        sequencer=CommitSequencer(workspace.code_dir),
        pipeline=pipeline,
        cursor=cursor,
        on_rewrite=config.on_rewrite,
        interval=config.poll_interval,
    )
