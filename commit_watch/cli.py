from __future__ import annotations

import logging
import signal
from dataclasses import replace
from typing import Optional

import typer
from rich import print

from .config import REWRITE_POLICIES, Config
from .errors import CommitWatchError, PreconditionError
from .notify.github import GitHubClient
from .pipeline import build_watcher
from .repo import RepoRef, Workspace, run_preflight
from .util import setup_logging

LOGGER = logging.getLogger(__name__)

app = typer.Typer(help="Watch a branch and run quality gates on every new commit")


@app.callback()
def main(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
        case_sensitive=False,
    ),
) -> None:
    setup_logging(log_level)


def _parse_repos(code_repo_url: str, report_repo_url: str) -> tuple[RepoRef, RepoRef]:
    try:
        return RepoRef.parse(code_repo_url), RepoRef.parse(report_repo_url)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))


def _preflight(config: Config, code: RepoRef, code_branch: str, report: RepoRef, report_branch: str) -> None:
    try:
        run_preflight(config.token, code, code_branch, report, report_branch)
    except PreconditionError as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)


def _raise_interrupt(signum, frame) -> None:
    raise KeyboardInterrupt(signal.Signals(signum).name)


@app.command("check")
def cli_check(
    code_repo_url: str = typer.Argument(..., help="Code repository URL"),
    code_branch: str = typer.Argument(..., help="Code branch to watch"),
    report_repo_url: str = typer.Argument(..., help="Report repository URL"),
    report_branch: str = typer.Argument(..., help="Report branch to publish to"),
    token: Optional[str] = typer.Option(
        None, envvar="GITHUB_PERSONAL_ACCESS_TOKEN", help="GitHub bearer token", show_default=False
    ),
) -> None:
    config = replace(Config(), token=token or Config().token)
    code, report = _parse_repos(code_repo_url, report_repo_url)
    _preflight(config, code, code_branch, report, report_branch)
    print("[green]All preconditions satisfied.[/green]")


@app.command("watch")
def cli_watch(
    code_repo_url: str = typer.Argument(..., help="Code repository URL"),
    code_branch: str = typer.Argument(..., help="Code branch to watch"),
    report_repo_url: str = typer.Argument(..., help="Report repository URL"),
    report_branch: str = typer.Argument(..., help="Report branch to publish to"),
    token: Optional[str] = typer.Option(
        None, envvar="GITHUB_PERSONAL_ACCESS_TOKEN", help="GitHub bearer token", show_default=False
    ),
    interval: Optional[float] = typer.Option(None, help="Seconds between polls (default 15)"),
    state_file: Optional[str] = typer.Option(None, help="JSON file recording the last processed commit"),
    dedupe_issues: Optional[bool] = typer.Option(
        None,
        "--dedupe-issues/--no-dedupe-issues",
        help="Reuse an open issue that already mentions the commit",
    ),
    on_rewrite: Optional[str] = typer.Option(None, help="fail|reset when branch history is rewritten"),
    once: bool = typer.Option(False, "--once", help="Run a single poll cycle and exit"),
) -> None:
    base = Config()
    config = replace(
        base,
        token=token or base.token,
        poll_interval=interval if interval is not None else base.poll_interval,
        state_file=state_file or base.state_file,
        dedupe_issues=base.dedupe_issues if dedupe_issues is None else dedupe_issues,
        on_rewrite=on_rewrite or base.on_rewrite,
    )
    if config.on_rewrite not in REWRITE_POLICIES:
        raise typer.BadParameter(f"--on-rewrite must be one of {', '.join(REWRITE_POLICIES)}")
    code, report = _parse_repos(code_repo_url, report_repo_url)
    _preflight(config, code, code_branch, report, report_branch)

    signal.signal(signal.SIGTERM, _raise_interrupt)
    workspace = Workspace(code, report)
    try:
        with workspace, GitHubClient(config.token, config.api_url, timeout=config.http_timeout) as client:
            watcher = build_watcher(config, workspace, client, code_branch, report_branch)
            if once:
                outcomes = watcher.poll_once()
                print(f"Evaluated {len(outcomes)} commit(s).")
            else:
                watcher.run_forever()
    except KeyboardInterrupt:
        LOGGER.info("Interrupted; workspace removed")
        raise typer.Exit(code=130)
    except CommitWatchError as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
