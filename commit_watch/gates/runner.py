from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path

from ..repo.models import CommitRecord
from ..repo.workspace import Workspace
from ..util import log_timing, remove_path
from .models import FORMAT_GATE, TEST_GATE, GateResult, GateResults, GateStatus
from .render import render_diff_html, render_text_html

LOGGER = logging.getLogger(__name__)

_OUTPUT_LIMIT = 4000
NO_TESTS_COLLECTED = 5


def pytest_command(report_path: Path) -> list[str]:
    return [
        sys.executable,
        "-m",
        "pytest",
        "--verbose",
        f"--html={report_path}",
        "--self-contained-html",
    ]


def black_command(files: list[str]) -> list[str]:
    return [sys.executable, "-m", "black", "--check", "--diff", *files]


def classify_test_exit(returncode: int) -> GateStatus:
    if returncode == 0:
        return GateStatus.PASSED
    if returncode == NO_TESTS_COLLECTED:
        return GateStatus.INDETERMINATE
    return GateStatus.FAILED


def run_test_gate(workdir: Path, report_path: Path, style: str = "solarized-light") -> GateResult:
    result = subprocess.run(
        pytest_command(report_path),
        cwd=workdir,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    status = classify_test_exit(result.returncode)
    LOGGER.info("Test gate exited %d (%s)", result.returncode, status.value)
    if report_path.exists():
        artifact = report_path.read_text(encoding="utf-8", errors="replace")
    else:
        LOGGER.warning("pytest left no HTML report at %s; publishing console output", report_path)
        artifact = render_text_html(result.stdout + result.stderr, style=style, title="pytest output")
    return GateResult(
        name=TEST_GATE,
        status=status,
        exit_code=result.returncode,
        artifact=artifact,
        output=_truncate(result.stdout + result.stderr),
    )


def run_format_gate(workdir: Path, style: str = "solarized-light") -> GateResult:
    # Only the repository root is checked, matching `black *.py`.
    files = sorted(
        path.name for path in workdir.glob("*.py") if path.is_file() and not path.name.startswith(".")
    )
    if not files:
        LOGGER.info("No Python files at %s; format gate passes", workdir)
        return GateResult(name=FORMAT_GATE, status=GateStatus.PASSED, exit_code=0)
    result = subprocess.run(
        black_command(files),
        cwd=workdir,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    if result.returncode == 0:
        LOGGER.info("Format gate passed")
        return GateResult(
            name=FORMAT_GATE,
            status=GateStatus.PASSED,
            exit_code=0,
            output=_truncate(result.stderr),
        )
    LOGGER.info("Format gate exited %d", result.returncode)
    diff_text = result.stdout or result.stderr
    return GateResult(
        name=FORMAT_GATE,
        status=GateStatus.FAILED,
        exit_code=result.returncode,
        artifact=render_diff_html(diff_text, style=style, title="black --check --diff"),
        output=_truncate(result.stderr),
    )


class GateRunner:
    def __init__(self, workspace: Workspace, style: str = "solarized-light") -> None:
        self.workspace = workspace
        self.style = style

    def run_test(self, workdir: Path, commit: CommitRecord | None = None) -> GateResult:
        report_dir = self.workspace.scratch_path("pytest-")
        try:
            with log_timing(LOGGER, "Test gate", _subject(commit)):
                return run_test_gate(workdir, report_dir / "pytest.html", style=self.style)
        finally:
            remove_path(report_dir)

    def run_format(self, workdir: Path, commit: CommitRecord | None = None) -> GateResult:
        with log_timing(LOGGER, "Format gate", _subject(commit)):
            return run_format_gate(workdir, style=self.style)

    def run(self, commit: CommitRecord) -> GateResults:
        with self.workspace.worktree(commit.hash) as workdir:
            test_result = self.run_test(workdir, commit)
            format_result = self.run_format(workdir, commit)
        return GateResults(test=test_result, format=format_result)


def _subject(commit: CommitRecord | None) -> str | None:
    return commit.short_hash if commit is not None else None


def _truncate(value: str | None) -> str:
    if value is None:
        return ""
    if len(value) <= _OUTPUT_LIMIT:
        return value
    return value[:_OUTPUT_LIMIT] + "\n...[truncated]..."
