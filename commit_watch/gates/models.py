from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

TEST_GATE = "test"
FORMAT_GATE = "format"


class GateStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class GateResult:
    name: str
    status: GateStatus
    exit_code: int
    artifact: str = ""
    output: str = ""

    @property
    def passed(self) -> bool:
        return self.status is GateStatus.PASSED

    @property
    def has_artifact(self) -> bool:
        return bool(self.artifact)


@dataclass(frozen=True)
class GateResults:
    test: GateResult
    format: GateResult

    @property
    def passed(self) -> bool:
        return self.test.passed and self.format.passed
