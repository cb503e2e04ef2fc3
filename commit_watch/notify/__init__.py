from .github import GitHubClient
from .issue import FailureKind, IssueRequest, build_issue, classify
from .notifier import Notifier

__all__ = ["GitHubClient", "FailureKind", "IssueRequest", "build_issue", "classify", "Notifier"]
