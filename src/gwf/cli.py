"""Command line interface for gwf."""

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Callable, Optional, TypeVar

import typer
from click.shell_completion import get_completion_class
from typer.main import get_command

from gwf import __version__
from gwf.config import load_config
from gwf.console import console, err_console, print_error, setup_logging
from gwf.errors import GwfError, NonInteractiveInputRequired
from gwf.git import GitRepo
from gwf.process import ExternalProcess, SubprocessRunner
from gwf.prompts import UserInput, default_input
from gwf.workflows import WorkflowContext
from gwf.workflows import bisect as bisect_workflow
from gwf.workflows import branches, reports, setup
from gwf.workflows.cleanup import cleanup as cleanup_workflow
from gwf.workflows.commit import commit as commit_workflow
from gwf.workflows.pr import create_pr
from gwf.workflows.sync import sync as sync_workflow
from gwf.workflows.tag import tag as tag_workflow
from gwf.workflows.undo import undo as undo_workflow

app = typer.Typer(help="Git Workflow Automator - Streamline your Git workflows")
logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class AppState:
    """Per-invocation values shared by all commands."""

    path: Path
    runner: ExternalProcess
    prompts: UserInput


def handle_errors(func: F) -> F:
    """Turn gwf errors into a diagnostic and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except NonInteractiveInputRequired as err:
            print_error(str(err))
            err_console.print("[dim]Pass the value as an option or run in a terminal.[/dim]")
            raise typer.Exit(code=1) from err
        except GwfError as err:
            print_error(str(err))
            raise typer.Exit(code=1) from err

    return wrapper  # type: ignore[return-value]


def _state(ctx: typer.Context) -> AppState:
    state = ctx.find_object(AppState)
    if state is None:
        raise GwfError("CLI state is not initialized")
    return state


def get_repo(ctx: typer.Context) -> GitRepo:
    """Get git repository instance."""
    return GitRepo(_state(ctx).path)


def workflow_context(ctx: typer.Context) -> WorkflowContext:
    """Open the repository and load its configuration."""
    state = _state(ctx)
    repo = GitRepo(state.path)
    return WorkflowContext(repo=repo, config=load_config(repo.root), runner=state.runner, prompts=state.prompts)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gwf {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase logging verbosity"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all output except errors"),
    path: Annotated[Path, typer.Option("--path", "-C", help="Path to git repository")] = Path("."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
) -> None:
    """Git Workflow Automator - Streamline your Git workflows."""
    setup_logging(verbosity=verbose, quiet=quiet)
    if isinstance(ctx.obj, AppState):
        # Injected by the caller (tests); only the path comes from the command line
        ctx.obj.path = path
    else:
        ctx.obj = AppState(path=path, runner=SubprocessRunner(), prompts=default_input())
    logger.debug("Using repository path %s", path)


@app.command()
@handle_errors
def init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Force initialization even if already initialized"),
) -> None:
    """Initialize gwf in the current repository."""
    setup.init(get_repo(ctx), force=force)


@app.command()
@handle_errors
def feature(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the feature branch"),
    from_: Optional[str] = typer.Option(None, "--from", "-f", help="Base branch to create from"),
    push: bool = typer.Option(False, "--push", "-p", help="Push to remote after creation"),
) -> None:
    """Create a feature branch."""
    branches.start_feature(workflow_context(ctx), name, from_=from_, push=push)


@app.command()
@handle_errors
def hotfix(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the hotfix"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Target branch for the hotfix"),
) -> None:
    """Create a hotfix branch."""
    branches.start_hotfix(workflow_context(ctx), name, target=target)


@app.command()
@handle_errors
def release(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Version number or increment (major/minor/patch)"),
    changelog: bool = typer.Option(False, "--changelog", "-c", help="Generate changelog"),
    tag: bool = typer.Option(False, "--tag", "-t", help="Tag the release"),
) -> None:
    """Create a release branch."""
    branches.start_release(workflow_context(ctx), version, changelog=changelog, tag=tag)


@app.command()
@handle_errors
def sync(
    ctx: typer.Context,
    all_branches: bool = typer.Option(False, "--all", "-a", help="Sync all branches"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Specific branch to sync"),
) -> None:
    """Synchronize branches with upstream."""
    report = sync_workflow(workflow_context(ctx), all_branches=all_branches, branch=branch)
    if report.failed:
        raise typer.Exit(code=1)


@app.command()
@handle_errors
def cleanup(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompts"),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Show what would be deleted"),
    remote: bool = typer.Option(False, "--remote", "-r", help="Also prune remote-tracking branches"),
) -> None:
    """Clean up merged branches."""
    result = cleanup_workflow(workflow_context(ctx), yes=yes, dry_run=dry_run, remote=remote)
    if result.failed:
        raise typer.Exit(code=1)


@app.command()
@handle_errors
def commit(
    ctx: typer.Context,
    message: Optional[str] = typer.Argument(None, help="Commit message"),
    ai: bool = typer.Option(False, "--ai", "-a", help="Use AI to generate commit message"),
    amend: bool = typer.Option(False, "--amend", help="Amend the last commit"),
) -> None:
    """Create a conventional commit."""
    commit_workflow(workflow_context(ctx), message=message, ai=ai, amend=amend)


@app.command()
@handle_errors
def pr(
    ctx: typer.Context,
    title: Optional[str] = typer.Argument(None, help="PR title"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Target branch"),
    draft: bool = typer.Option(False, "--draft", "-d", help="Mark as draft"),
) -> None:
    """Create a pull request."""
    create_pr(workflow_context(ctx), title=title, target=target, draft=draft)


@app.command()
@handle_errors
def standup(
    ctx: typer.Context,
    days: int = typer.Option(1, "--days", "-d", min=1, help="Number of days to look back"),
    all_branches: bool = typer.Option(False, "--all", "-a", help="Include all local branches"),
) -> None:
    """Generate a standup report."""
    reports.standup(workflow_context(ctx), days=days, all_branches=all_branches)


@app.command()
@handle_errors
def config(
    ctx: typer.Context,
    show: bool = typer.Option(False, "--show", "-s", help="Show current configuration"),
    edit: bool = typer.Option(False, "--edit", "-e", help="Edit configuration"),
    reset: bool = typer.Option(False, "--reset", "-r", help="Reset to defaults"),
) -> None:
    """Manage gwf configuration."""
    repo = get_repo(ctx)
    if reset:
        setup.reset_config(repo)
    elif edit:
        setup.edit_config(repo, _state(ctx).runner)
    else:
        setup.show_config(repo)


class Shell(str, Enum):
    bash = "bash"
    zsh = "zsh"
    fish = "fish"


@app.command()
def completions(
    ctx: typer.Context,
    shell: Shell = typer.Argument(..., help="Shell to generate completions for"),
) -> None:
    """Generate shell completions."""
    completion_class = get_completion_class(shell.value)
    if completion_class is None:
        print_error(f"Unsupported shell: {shell.value}")
        raise typer.Exit(code=1)
    script = completion_class(get_command(app), {}, "gwf", "_GWF_COMPLETE").source()
    typer.echo(script)


class BisectAction(str, Enum):
    start = "start"
    good = "good"
    bad = "bad"
    skip = "skip"
    reset = "reset"
    run = "run"


@app.command()
@handle_errors
def bisect(
    ctx: typer.Context,
    action: Optional[BisectAction] = typer.Argument(None, help="Bisect step; asked interactively when omitted"),
    good: Optional[str] = typer.Option(None, "--good", "-g", help="Known good commit (start/run)"),
    bad: Optional[str] = typer.Option(None, "--bad", "-b", help="Known bad commit (start/run)"),
    script: Optional[str] = typer.Option(None, "--script", "-s", help="Test script (run)"),
) -> None:
    """Find the commit that introduced a bug."""
    bisect_workflow.bisect(
        workflow_context(ctx),
        action=action.value if action else None,
        bad=bad,
        good=good,
        script=script,
    )


@app.command()
@handle_errors
def tag(ctx: typer.Context) -> None:
    """Create a semantic version tag."""
    tag_workflow(workflow_context(ctx))


@app.command()
@handle_errors
def undo(ctx: typer.Context) -> None:
    """Undo the last commit or merge."""
    undo_workflow(workflow_context(ctx))


@app.command()
@handle_errors
def stats(ctx: typer.Context) -> None:
    """Show repository statistics."""
    reports.stats(workflow_context(ctx))


@app.command()
@handle_errors
def status(ctx: typer.Context) -> None:
    """Show working tree and remote status."""
    reports.status(workflow_context(ctx))


if __name__ == "__main__":
    app()
