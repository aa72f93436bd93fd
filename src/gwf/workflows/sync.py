"""Bring local branches up to date with origin."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from rich.markup import escape

from gwf.config import SyncStrategy
from gwf.console import console, print_info, print_success, print_warning
from gwf.errors import GitError
from gwf.workflows import WorkflowContext

logger = logging.getLogger(__name__)

REMOTE = "origin"
STASH_MESSAGE = "gwf-sync-autostash"


@dataclass
class SyncReport:
    """Per-branch outcome of a sync run."""

    synced: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)


def _stash(ctx: WorkflowContext) -> bool:
    """Stash local changes; returns whether a stash entry was created."""
    print_info("Stashing uncommitted changes...")
    output = ctx.git_checked("stash", "push", "-m", STASH_MESSAGE)
    return "No local changes to save" not in output


def _reconcile(ctx: WorkflowContext, branch: str, strategy: SyncStrategy) -> Optional[str]:
    """Rebase or merge ``branch`` onto origin; returns an error message on failure."""
    upstream = f"{REMOTE}/{branch}"
    command = "rebase" if strategy is SyncStrategy.REBASE else "merge"
    print_info("Rebasing..." if command == "rebase" else "Merging...")

    result = ctx.git(command, upstream)
    if result.ok:
        return None

    # Never leave a half-finished rebase or merge behind
    abort = ctx.git(command, "--abort")
    if not abort.ok:
        logger.warning("git %s --abort failed: %s", command, abort.stderr.strip())
    return (result.stderr or result.stdout).strip() or f"git {command} exited with {result.returncode}"


def sync(ctx: WorkflowContext, all_branches: bool = False, branch: Optional[str] = None) -> SyncReport:
    """Fetch origin and reconcile each target branch with its remote counterpart.

    A failing branch is aborted and reported; the remaining branches are
    still processed. Stashed changes are restored on the starting branch (or
    commit, when HEAD was detached and targets were named) after every
    branch, whatever the outcome.
    """
    settings = ctx.config.sync
    report = SyncReport()

    print_info("Synchronizing with remote repository...")
    with console.status(f"Fetching from {REMOTE}..."):
        ctx.repo.fetch(REMOTE, prune=settings.prune_on_fetch)
    print_success("Fetch complete")

    if all_branches:
        start = ctx.repo.head_ref()
        targets = ctx.repo.list_branches(include_remote=False)
    elif branch:
        start = ctx.repo.head_ref()
        targets = [branch]
    else:
        start = ctx.repo.current_branch()
        targets = [start]

    remote_branches = set(ctx.repo.list_branches(include_remote=True))

    for target in targets:
        console.print(f"\n[bold]Syncing branch:[/bold] [cyan]{escape(target)}[/cyan]")

        stashed = False
        if settings.auto_stash and ctx.repo.has_uncommitted_changes():
            stashed = _stash(ctx)

        try:
            if f"{REMOTE}/{target}" not in remote_branches:
                print_warning(f"No remote branch '{REMOTE}/{target}', skipping")
                report.skipped.append(target)
                continue

            ctx.repo.checkout(target)
            error = _reconcile(ctx, target, settings.strategy)
            if error is None:
                report.synced.append(target)
                print_success(f"Branch '{target}' synchronized")
            else:
                report.failed[target] = error
                print_warning(f"Failed to sync '{target}': {error}")
        except GitError as err:
            report.failed[target] = str(err)
            print_warning(f"Failed to sync '{target}': {err}")
        finally:
            try:
                if ctx.repo.head_ref() != start:
                    ctx.repo.restore_head(start)
            except GitError as err:
                print_warning(f"Failed to return to '{start}': {err}")
            if stashed:
                print_info("Restoring stashed changes...")
                pop = ctx.git("stash", "pop")
                if not pop.ok:
                    print_warning(f"Failed to restore stashed changes: {pop.stderr.strip()}")

    if settings.prune_on_fetch:
        print_info("Pruning remote branches...")
        ctx.git_checked("remote", "prune", REMOTE)
        print_success("Remote branches pruned")

    if report.failed:
        print_warning(f"{len(report.failed)} branch(es) failed to sync: {', '.join(sorted(report.failed))}")
    return report
