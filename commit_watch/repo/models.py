from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

_SCP_LIKE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[^/].*)$")


@dataclass(frozen=True)
class RepoRef:
    url: str
    owner: str
    name: str

    @classmethod
    def parse(cls, url: str) -> "RepoRef":
        trimmed = url.strip().rstrip("/")
        scp_match = _SCP_LIKE.match(trimmed)
        if "://" in trimmed:
            path = trimmed.split("://", 1)[1].partition("/")[2]
        elif scp_match:
            path = scp_match.group("path")
        else:
            path = str(Path(trimmed).resolve()).lstrip("/")
        parts = [part for part in path.split("/") if part]
        if not parts:
            raise ValueError(f"Cannot determine repository name from {url!r}")
        name = parts[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        owner = parts[-2] if len(parts) >= 2 else ""
        return cls(url=url, owner=owner, name=name)


@dataclass
class BranchPointer:
    repo: RepoRef
    branch: str
    commit_hash: str

    def advance(self, new_hash: str) -> bool:
        if new_hash == self.commit_hash:
            return False
        self.commit_hash = new_hash
        return True


@dataclass(frozen=True)
class CommitRecord:
    hash: str
    author_email: str
    position: int

    @property
    def short_hash(self) -> str:
        return self.hash[:7]
