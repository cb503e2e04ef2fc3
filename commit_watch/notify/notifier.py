from __future__ import annotations

import logging

import httpx

from ..gates.models import GateResults
from ..repo.models import CommitRecord, RepoRef
from ..report.publisher import PublishedArtifact
from .github import GitHubClient
from .issue import IssueRequest, build_issue

LOGGER = logging.getLogger(__name__)


class Notifier:
    def __init__(
        self,
        client: GitHubClient,
        code_repo: RepoRef,
        test_label: str = "res_pytest",
        format_label: str = "res_black",
        dedupe: bool = False,
    ) -> None:
        self.client = client
        self.code_repo = code_repo
        self.test_label = test_label
        self.format_label = format_label
        self.dedupe = dedupe

    def resolve_assignee(self, email: str) -> str | None:
        """Return the login matching ``email`` only when the search is unambiguous."""
        if not email:
            return None
        try:
            data = self.client.search_users(email)
        except httpx.HTTPError as exc:
            LOGGER.warning("User search for %s failed: %s", email, exc)
            return None
        items = data.get("items") or []
        if data.get("total_count") != 1 or len(items) != 1:
            LOGGER.info("User search for %s returned %s matches; leaving unassigned", email, data.get("total_count"))
            return None
        return items[0].get("login") or None

    def find_existing_issue(self, commit_hash: str) -> str | None:
        for issue in self.client.list_open_issues(self.code_repo.owner, self.code_repo.name):
            if "pull_request" in issue:
                continue
            if commit_hash in (issue.get("body") or ""):
                return issue.get("html_url")
        return None

    def compose(
        self,
        commit: CommitRecord,
        results: GateResults,
        artifacts: list[PublishedArtifact],
    ) -> IssueRequest:
        return build_issue(
            commit,
            results,
            artifacts,
            assignee=self.resolve_assignee(commit.author_email),
            test_label=self.test_label,
            format_label=self.format_label,
        )

    def notify(
        self,
        commit: CommitRecord,
        results: GateResults,
        artifacts: list[PublishedArtifact],
    ) -> str:
        if self.dedupe:
            existing = self.find_existing_issue(commit.hash)
            if existing:
                LOGGER.info("Issue for %s already open: %s", commit.short_hash, existing)
                return existing
        request = self.compose(commit, results, artifacts)
        response = self.client.create_issue(self.code_repo.owner, self.code_repo.name, request.to_payload())
        issue_url = response.get("html_url", "")
        LOGGER.info("Filed issue for %s: %s", commit.short_hash, issue_url)
        return issue_url
