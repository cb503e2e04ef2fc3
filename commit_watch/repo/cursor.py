from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from ..util import ensure_dir
from .models import BranchPointer

LOGGER = logging.getLogger(__name__)


class CursorStore:
    """Last fully processed commit per repository/branch, kept in a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            LOGGER.warning("Ignoring unreadable cursor file %s", self.path)
            return {}

    @staticmethod
    def _key(pointer: BranchPointer) -> str:
        return f"{pointer.repo.url}#{pointer.branch}"

    def load(self, pointer: BranchPointer) -> str | None:
        entry = self._load().get(self._key(pointer))
        if not entry:
            return None
        return entry.get("commit")

    def save(self, pointer: BranchPointer, commit_hash: str) -> None:
        payload = self._load()
        payload[self._key(pointer)] = {
            "commit": commit_hash,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        ensure_dir(self.path.parent)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self.path)
