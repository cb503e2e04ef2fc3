from __future__ import annotations

import os
from dataclasses import dataclass


def _get_env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


def _get_env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


REWRITE_POLICIES = ("fail", "reset")


@dataclass(frozen=True)
class Config:
    token: str | None = os.getenv("GITHUB_PERSONAL_ACCESS_TOKEN")
    api_url: str = os.getenv("CW_API_URL", "https://api.github.com")
    poll_interval: float = _get_env_float("CW_POLL_INTERVAL", "15")
    test_label: str = os.getenv("CW_TEST_LABEL", "res_pytest")
    format_label: str = os.getenv("CW_FORMAT_LABEL", "res_black")
    diff_style: str = os.getenv("CW_DIFF_STYLE", "solarized-light")
    http_timeout: float = _get_env_float("CW_HTTP_TIMEOUT", "30")
    state_file: str | None = os.getenv("CW_STATE_FILE")
    dedupe_issues: bool = _get_env_bool("CW_DEDUPE_ISSUES", "0")
    on_rewrite: str = os.getenv("CW_ON_REWRITE", "fail")
