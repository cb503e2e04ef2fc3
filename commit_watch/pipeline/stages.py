from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from ..gates.models import GateResult, GateResults
from ..gates.runner import GateRunner
from ..marker import OutcomeMarker
from ..notify.notifier import Notifier
from ..repo.models import CommitRecord
from ..repo.workspace import Workspace
from ..report.publisher import PublishedArtifact, ReportPublisher

LOGGER = logging.getLogger(__name__)


@dataclass
class StageContext:
    """Everything one commit's evaluation produces, owned by that commit only."""

    commit: CommitRecord
    cleanups: ExitStack
    workdir: Path | None = None
    test_result: GateResult | None = None
    format_result: GateResult | None = None
    artifacts: list[PublishedArtifact] = field(default_factory=list)
    issue_url: str | None = None
    marked: bool = False
    notify_error: str | None = None

    @property
    def results(self) -> GateResults:
        if self.test_result is None or self.format_result is None:
            raise RuntimeError(f"Gates have not run for {self.commit.hash}")
        return GateResults(test=self.test_result, format=self.format_result)


class Stage:
    name = "stage"

    def run(self, context: StageContext) -> None:
        raise NotImplementedError


class CheckoutStage(Stage):
    name = "checkout"

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    def run(self, context: StageContext) -> None:
        context.workdir = context.cleanups.enter_context(self.workspace.worktree(context.commit.hash))


class TestGateStage(Stage):
    name = "test"

    def __init__(self, gate_runner: GateRunner) -> None:
        self.gate_runner = gate_runner

    def run(self, context: StageContext) -> None:
        context.test_result = self.gate_runner.run_test(context.workdir, context.commit)


class FormatGateStage(Stage):
    name = "format"

    def __init__(self, gate_runner: GateRunner) -> None:
        self.gate_runner = gate_runner

    def run(self, context: StageContext) -> None:
        context.format_result = self.gate_runner.run_format(context.workdir, context.commit)


class PublishStage(Stage):
    name = "publish"

    def __init__(self, publisher: ReportPublisher) -> None:
        self.publisher = publisher

    def run(self, context: StageContext) -> None:
        context.artifacts = self.publisher.publish(context.commit, context.results)


class NotifyOrMarkStage(Stage):
    name = "notify-or-mark"

    def __init__(self, notifier: Notifier, marker: OutcomeMarker) -> None:
        self.notifier = notifier
        self.marker = marker

    def run(self, context: StageContext) -> None:
        results = context.results
        if results.passed:
            self.marker.mark_success(context.commit)
            context.marked = True
            return
        try:
            context.issue_url = self.notifier.notify(context.commit, results, context.artifacts)
        except httpx.HTTPError as exc:
            # A lost issue must not stop later commits from being evaluated.
            LOGGER.error("Could not file issue for %s: %s", context.commit.hash, exc)
            context.notify_error = str(exc)


class CommitPipeline:
    def __init__(self, stages: list[Stage]) -> None:
        self.stages = stages

    def run(self, commit: CommitRecord) -> StageContext:
        with ExitStack() as stack:
            context = StageContext(commit=commit, cleanups=stack)
            for stage in self.stages:
                LOGGER.debug("Commit %s: stage %s", commit.short_hash, stage.name)
                stage.run(context)
        return context


def default_stages(
    workspace: Workspace,
    gate_runner: GateRunner,
    publisher: ReportPublisher,
    notifier: Notifier,
    marker: OutcomeMarker,
) -> list[Stage]:
    return [
        CheckoutStage(workspace),
        TestGateStage(gate_runner),
        FormatGateStage(gate_runner),
        PublishStage(publisher),
        NotifyOrMarkStage(notifier, marker),
    ]
