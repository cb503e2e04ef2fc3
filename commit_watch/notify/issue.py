from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..gates.models import FORMAT_GATE, TEST_GATE, GateResults, GateStatus
from ..repo.models import CommitRecord
from ..report.publisher import PublishedArtifact

PREAMBLE = "Automatically generated message"


class FailureKind(Enum):
    TESTS_INDETERMINATE_FORMAT_FAILED = (
        "Unit tests do not exist in the repository or do not work correctly and formatting test failed."
    )
    TESTS_AND_FORMAT_FAILED = "failed unit and formatting tests."
    TESTS_INDETERMINATE_FORMAT_PASSED = (
        "Unit tests do not exist in the repository or do not work correctly and formatting test passed."
    )
    TESTS_FAILED = "failed unit tests."
    FORMAT_FAILED = "failed formatting test."

    @property
    def sentence(self) -> str:
        return self.value

    @property
    def tests_defective(self) -> bool:
        return self in (FailureKind.TESTS_AND_FORMAT_FAILED, FailureKind.TESTS_FAILED)

    @property
    def format_defective(self) -> bool:
        return self in (FailureKind.TESTS_AND_FORMAT_FAILED, FailureKind.FORMAT_FAILED)


def classify(test_status: GateStatus, format_status: GateStatus) -> FailureKind:
    format_failed = format_status is not GateStatus.PASSED
    if test_status is GateStatus.INDETERMINATE:
        if format_failed:
            return FailureKind.TESTS_INDETERMINATE_FORMAT_FAILED
        return FailureKind.TESTS_INDETERMINATE_FORMAT_PASSED
    if test_status is GateStatus.FAILED:
        if format_failed:
            return FailureKind.TESTS_AND_FORMAT_FAILED
        return FailureKind.TESTS_FAILED
    if format_failed:
        return FailureKind.FORMAT_FAILED
    raise ValueError("Both gates passed; there is no failure to classify")


@dataclass(frozen=True)
class IssueRequest:
    title: str
    body: str
    labels: tuple[str, ...] = field(default_factory=tuple)
    assignees: tuple[str, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        payload: dict = {"title": self.title, "body": self.body}
        if self.labels:
            payload["labels"] = list(self.labels)
        if self.assignees:
            payload["assignees"] = list(self.assignees)
        return payload


def build_issue(
    commit: CommitRecord,
    results: GateResults,
    artifacts: list[PublishedArtifact],
    assignee: str | None = None,
    test_label: str = "res_pytest",
    format_label: str = "res_black",
) -> IssueRequest:
    kind = classify(results.test.status, results.format.status)
    urls = {artifact.gate: artifact.url for artifact in artifacts}
    if TEST_GATE not in urls:
        raise ValueError(f"No published pytest report for {commit.hash}")

    labels: list[str] = []
    if kind.tests_defective:
        labels.append(test_label)
    if kind.format_defective:
        labels.append(format_label)

    lines = [
        PREAMBLE,
        "",
        f"{commit.hash} {kind.sentence}",
        f"Pytest report: {urls[TEST_GATE]}",
    ]
    if results.format.has_artifact and FORMAT_GATE in urls:
        lines.append(f"Black report: {urls[FORMAT_GATE]}")

    return IssueRequest(
        title=f"{commit.short_hash} {kind.sentence}",
        body="\n".join(lines) + "\n",
        labels=tuple(labels),
        assignees=(assignee,) if assignee else (),
    )
