from __future__ import annotations

from typing import Any

import httpx

API_VERSION = "2022-11-28"


class GitHubClient:
    """Minimal REST client for the calls the watcher makes."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": API_VERSION,
        }
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._http.request(method, self.base_url + path, headers=self.headers, **kwargs)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            content_type = response.headers.get("content-type", "unknown")
            raise httpx.DecodingError(
                f"{method} {path} returned a non-JSON body ({content_type})", request=response.request
            ) from exc

    def search_users(self, query: str) -> dict:
        return self._request("GET", "/search/users", params={"q": query})

    def create_issue(self, owner: str, repo: str, payload: dict) -> dict:
        return self._request("POST", f"/repos/{owner}/{repo}/issues", json=payload)

    def list_open_issues(self, owner: str, repo: str, per_page: int = 100) -> list[dict]:
        issues: list[dict] = []
        page = 1
        while True:
            data = self._request(
                "GET",
                f"/repos/{owner}/{repo}/issues",
                params={"state": "open", "per_page": per_page, "page": page},
            )
            issues.extend(data)
            if len(data) < per_page:
                return issues
            page += 1
