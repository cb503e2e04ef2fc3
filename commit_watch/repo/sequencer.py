from __future__ import annotations

from pathlib import Path

from ..errors import HistoryRewriteError
from ..util import run_git
from .models import CommitRecord

_FIELD_SEP = "\x1f"


class CommitSequencer:
    def __init__(self, code_dir: Path) -> None:
        self.code_dir = code_dir

    def is_ancestor(self, old_hash: str, new_hash: str) -> bool:
        result = run_git(["merge-base", "--is-ancestor", old_hash, new_hash], cwd=self.code_dir, check=False)
        return result.returncode == 0

    def sequence(self, old_hash: str, new_hash: str) -> list[CommitRecord]:
        if old_hash == new_hash:
            return []
        if not self.is_ancestor(old_hash, new_hash):
            raise HistoryRewriteError(old_hash, new_hash)
        output = run_git(
            [
                "log",
                "--reverse",
                "--topo-order",
                f"--format=%H{_FIELD_SEP}%ae",
                f"{old_hash}..{new_hash}",
            ],
            cwd=self.code_dir,
        ).stdout
        return _parse_log(output)

    def single(self, commit_hash: str) -> list[CommitRecord]:
        output = run_git(["log", "-n", "1", f"--format=%H{_FIELD_SEP}%ae", commit_hash], cwd=self.code_dir).stdout
        return _parse_log(output)


def _parse_log(output: str) -> list[CommitRecord]:
    records: list[CommitRecord] = []
    seen: set[str] = set()
    for line in output.splitlines():
        if not line.strip():
            continue
        commit_hash, _, email = line.partition(_FIELD_SEP)
        if commit_hash in seen:
            continue
        seen.add(commit_hash)
        records.append(CommitRecord(hash=commit_hash, author_email=email, position=len(records)))
    return records
