from .models import BranchPointer, CommitRecord, RepoRef
from .cursor import CursorStore
from .poller import RemotePoller
from .preflight import run_preflight
from .sequencer import CommitSequencer
from .workspace import Workspace

__all__ = [
    "BranchPointer",
    "CommitRecord",
    "RepoRef",
    "CursorStore",
    "RemotePoller",
    "run_preflight",
    "CommitSequencer",
    "Workspace",
]
