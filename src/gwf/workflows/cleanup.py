"""Delete local branches that are already merged into main."""

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatch

from rich.table import Table

from gwf.console import console, print_info, print_success, print_warning
from gwf.errors import GitError
from gwf.workflows import WorkflowContext

logger = logging.getLogger(__name__)


@dataclass
class CleanupResult:
    """Outcome of a cleanup run."""

    candidates: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    dry_run: bool = False
    cancelled: bool = False


def is_protected(branch: str, protect: list[str]) -> bool:
    """Check ``branch`` against protection patterns (plain names or globs)."""
    return any(fnmatch(branch, pattern.strip()) for pattern in protect if pattern.strip())


def find_merged_branches(ctx: WorkflowContext) -> list[str]:
    """Local branches merged into main, minus current, main and protected ones."""
    main_branch = ctx.config.workflows.main_branch
    protect = ctx.config.cleanup.protect_branches
    current = ctx.repo.current_branch()

    candidates = []
    for branch in ctx.repo.list_branches(include_remote=False):
        if branch in (current, main_branch) or is_protected(branch, protect):
            logger.debug("Skipping %s (current, main or protected)", branch)
            continue
        if ctx.repo.is_branch_merged(branch, main_branch):
            candidates.append(branch)
    return sorted(candidates)


def _candidates_table(ctx: WorkflowContext, branches: list[str]) -> Table:
    table = Table(
        title="Branches to Delete",
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Last Commit", style="yellow", no_wrap=True)
    for branch in branches:
        table.add_row(branch, ctx.repo.get_branch_last_commit(branch))
    return table


def cleanup(ctx: WorkflowContext, yes: bool = False, dry_run: bool = False, remote: bool = False) -> CleanupResult:
    """Find merged branches and delete them after confirmation.

    Args:
        ctx: Workflow context
        yes: Skip the confirmation prompt
        dry_run: Only report what would be deleted
        remote: Prune stale remote-tracking branches of origin afterwards

    Returns:
        What was found, deleted and what failed
    """
    print_info("Scanning for branches to clean up...")
    result = CleanupResult(dry_run=dry_run)
    result.candidates = find_merged_branches(ctx)

    if not result.candidates:
        print_success("No branches to clean up!")
        return result

    console.print()
    console.print(_candidates_table(ctx, result.candidates))

    if dry_run:
        print_info("Dry run mode - no branches will be deleted")
        return result

    if not yes and not ctx.prompts.confirm("Do you want to delete these branches?", default=False):
        print_info("Cleanup cancelled")
        result.cancelled = True
        return result

    for branch in result.candidates:
        try:
            ctx.repo.delete_branch(branch)
        except GitError as err:
            result.failed[branch] = str(err)
            print_warning(f"Failed to delete '{branch}': {err}")
        else:
            result.deleted.append(branch)
            print_success(f"Deleted branch '{branch}'")

    if result.failed:
        print_warning(f"{len(result.failed)} of {len(result.candidates)} branch(es) could not be deleted")

    if remote:
        print_info("Pruning remote branches...")
        ctx.repo.fetch("origin", prune=True)
        print_success("Remote branches pruned")

    return result
