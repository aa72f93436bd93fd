"""Pull request creation through ``gh`` or the browser."""

import logging
import webbrowser
from typing import Callable, Optional
from urllib.parse import quote

from gwf.console import print_info, print_success
from gwf.errors import GitError, SubprocessFailure
from gwf.workflows import WorkflowContext

logger = logging.getLogger(__name__)


def repo_web_url(remote_url: str) -> Optional[str]:
    """Map a clone URL to its https web URL, or None if it is not recognised."""
    url = remote_url.strip()
    if url.endswith(".git"):
        url = url[: -len(".git")]
    if url.startswith("git@"):
        # git@github.com:user/repo -> https://github.com/user/repo
        host, _, path = url[len("git@") :].partition(":")
        return f"https://{host}/{path}" if path else None
    if url.startswith("ssh://git@"):
        host, _, path = url[len("ssh://git@") :].partition("/")
        return f"https://{host}/{path}" if path else None
    if url.startswith(("https://", "http://")):
        return url
    return None


def compare_url(web_url: str, base: str, head: str, title: str) -> str:
    return f"{web_url}/compare/{quote(base, safe='/')}...{quote(head, safe='/')}?expand=1&title={quote(title)}"


def create_pr(
    ctx: WorkflowContext,
    title: Optional[str] = None,
    target: Optional[str] = None,
    draft: bool = False,
    open_browser: Callable[[str], bool] = webbrowser.open,
) -> str:
    """Open a pull request from the current branch.

    Returns:
        The PR URL reported by ``gh``, or the compare URL opened in the browser
    """
    main_branch = ctx.config.workflows.main_branch
    branch = ctx.repo.current_branch()
    if branch == main_branch:
        raise GitError("Cannot create PR from main branch")

    base = target or main_branch
    if title is None:
        title = ctx.prompts.text("PR title", default=branch) if ctx.prompts.interactive else branch

    print_info("Creating pull request...")

    if ctx.runner.which("gh"):
        args = ["pr", "create", "--title", title, "--body", "", "--base", base]
        if draft:
            args.append("--draft")
        result = ctx.runner.run("gh", args, cwd=ctx.repo.root)
        if not result.ok:
            raise SubprocessFailure(result.command, result.stderr, result.returncode)
        url = result.stdout.strip()
        print_success(f"Pull request created: {url}")
        return url

    print_info("GitHub CLI not found. Opening browser...")
    web_url = repo_web_url(ctx.repo.remote_url("origin"))
    if web_url is None:
        raise GitError("Could not determine a web URL for remote 'origin'")
    url = compare_url(web_url, base, branch, title)
    logger.debug("Opening %s", url)
    if not open_browser(url):
        raise GitError(f"Failed to open browser, visit {url}")
    print_success("Browser opened with PR creation page")
    return url
