"""Read-only reports: standup, stats and status."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from rich.markup import escape

from gwf.console import console, print_heading, print_info
from gwf.errors import DetachedHead
from gwf.workflows import WorkflowContext

logger = logging.getLogger(__name__)

# Unit separator, never found in commit subjects or branch names
_SEP = "\x1f"


@dataclass
class CommitLine:
    hash: str
    subject: str
    when: str


@dataclass
class StandupReport:
    since: str
    commits: list[CommitLine] = field(default_factory=list)
    branch: str = ""
    dirty: bool = False
    recent_branches: list[tuple[str, str]] = field(default_factory=list)


def _branch_or_detached(ctx: WorkflowContext) -> str:
    try:
        return ctx.repo.current_branch()
    except DetachedHead:
        return "(detached)"


def _split_lines(output: str, fields: int) -> list[list[str]]:
    rows = []
    for line in output.splitlines():
        parts = line.split(_SEP)
        if len(parts) >= fields:
            rows.append(parts[:fields])
    return rows


def collect_standup(ctx: WorkflowContext, days: int = 1, all_branches: bool = False, now: Optional[datetime] = None) -> StandupReport:
    """Gather the data for a standup report without printing it."""
    since = ((now or datetime.now()) - timedelta(days=days)).strftime("%Y-%m-%d")
    report = StandupReport(since=since)

    args = ["log", "--since", since, f"--pretty=format:%h{_SEP}%s{_SEP}%cr", "--no-merges"]
    email = ctx.git("config", "user.email").stdout.strip()
    if email:
        args += ["--author", email]
    if all_branches:
        args.append("--branches")
    report.commits = [CommitLine(*row) for row in _split_lines(ctx.git_checked(*args), 3)]

    report.branch = _branch_or_detached(ctx)
    report.dirty = ctx.repo.has_uncommitted_changes()

    recent = ctx.git_checked(
        "for-each-ref",
        "--sort=-committerdate",
        f"--format=%(refname:short){_SEP}%(committerdate:relative)",
        "--count=5",
        "refs/heads/",
    )
    report.recent_branches = [(name, when) for name, when in _split_lines(recent, 2)]
    return report


def standup(ctx: WorkflowContext, days: int = 1, all_branches: bool = False) -> StandupReport:
    """Print commits since ``days`` ago, current state and recent branches."""
    report = collect_standup(ctx, days=days, all_branches=all_branches)

    console.print("[bold underline]Daily Standup Report[/bold underline]")
    console.print(f"[cyan]{datetime.now():%A, %B %d, %Y}[/cyan]")

    if not report.commits:
        print_info(f"No commits in the last {days} day(s)")
    else:
        print_heading("Recent commits:")
        for commit in report.commits:
            console.print(f"  [yellow]{commit.hash}[/yellow] {escape(commit.subject)} [dim]({commit.when})[/dim]")

    print_heading("Current status:")
    console.print(f"  Branch: [cyan]{escape(report.branch)}[/cyan]")
    if report.dirty:
        console.print("  [yellow]⚠[/yellow] Uncommitted changes")
    else:
        console.print("  [green]✓[/green] Working directory clean")

    if report.recent_branches:
        print_heading("Recent branches:")
        for name, when in report.recent_branches:
            marker = "*" if name == report.branch else " "
            console.print(f"  [green]{marker}[/green] [cyan]{escape(name)}[/cyan] [dim]({when})[/dim]")

    print_heading("Tips:")
    console.print("  • Run 'gwf sync' to update your branches")
    console.print("  • Run 'gwf cleanup' to remove merged branches")
    console.print("  • Run 'gwf pr' to create a pull request")
    return report


@dataclass
class RepoStats:
    total_commits: int
    authors: Counter
    branches: int
    tags: int
    last_week: int

    def top_contributors(self, limit: int = 5) -> list[tuple[str, int]]:
        return self.authors.most_common(limit)


def collect_stats(ctx: WorkflowContext, now: Optional[datetime] = None) -> RepoStats:
    """Aggregate commit, author, branch and tag counts for HEAD's history."""
    commits = ctx.repo.commits("HEAD")
    week_ago = (now or datetime.now(timezone.utc)) - timedelta(days=7)
    return RepoStats(
        total_commits=len(commits),
        authors=Counter(commit.author.name or "unknown" for commit in commits),
        branches=len(ctx.repo.list_branches()) + len(ctx.repo.list_branches(include_remote=True)),
        tags=len(ctx.repo.list_tags()),
        last_week=sum(1 for commit in commits if commit.committed_datetime > week_ago),
    )


def stats(ctx: WorkflowContext) -> RepoStats:
    result = collect_stats(ctx)

    console.print("[bold bright_blue]Repository Statistics[/bold bright_blue]")
    console.print("[dim]" + "─" * 30 + "[/dim]")
    console.print(f"[cyan]Total commits:[/cyan] [yellow]{result.total_commits}[/yellow]")
    console.print(f"[cyan]Contributors:[/cyan] [yellow]{len(result.authors)}[/yellow]")
    console.print(f"[cyan]Branches:[/cyan] [yellow]{result.branches}[/yellow]")
    if result.tags:
        console.print(f"[cyan]Tags:[/cyan] [yellow]{result.tags}[/yellow]")

    console.print("\n[bright_blue]Top Contributors[/bright_blue]")
    console.print("[dim]" + "─" * 30 + "[/dim]")
    for rank, (author, count) in enumerate(result.top_contributors(), start=1):
        bar = "█" * max(count * 20 // result.total_commits, 1)
        console.print(f"{rank:2}. {escape(author[:20]):20} [green]{bar}[/green] [dim]{count}[/dim]")

    if result.last_week:
        console.print(f"\n[cyan]Last 7 days:[/cyan] [yellow]{result.last_week}[/yellow] commits")
    return result


@dataclass
class StatusSummary:
    branch: str
    modified: int = 0
    added: int = 0
    deleted: int = 0
    ahead: Optional[int] = None
    behind: Optional[int] = None

    @property
    def clean(self) -> bool:
        return not (self.modified or self.added or self.deleted)


def collect_status(ctx: WorkflowContext) -> StatusSummary:
    summary = StatusSummary(branch=_branch_or_detached(ctx))
    for code, _path in ctx.repo.status_entries():
        if "M" in code:
            summary.modified += 1
        if "A" in code or code == "??":
            summary.added += 1
        if "D" in code:
            summary.deleted += 1

    upstream = f"origin/{summary.branch}"
    if ctx.repo.branch_exists(upstream, remote=True):
        summary.ahead, summary.behind = ctx.repo.ahead_behind(summary.branch, upstream)
    return summary


def status(ctx: WorkflowContext) -> StatusSummary:
    summary = collect_status(ctx)
    console.print(f"[bright_blue]Branch:[/bright_blue] [yellow]{escape(summary.branch)}[/yellow]")

    if summary.clean:
        console.print("[green]Working tree clean[/green]")
    else:
        if summary.modified:
            console.print(f"  [yellow]{summary.modified}[/yellow] modified")
        if summary.added:
            console.print(f"  [green]{summary.added}[/green] added")
        if summary.deleted:
            console.print(f"  [red]{summary.deleted}[/red] deleted")

    if summary.ahead or summary.behind:
        console.print(
            f"\n[bright_blue]Remote:[/bright_blue] [green]{summary.ahead}[/green] ahead, "
            f"[yellow]{summary.behind}[/yellow] behind"
        )
    return summary
