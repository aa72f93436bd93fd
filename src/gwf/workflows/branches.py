"""Feature, hotfix and release branch workflows."""

import logging
from typing import Optional

from gwf.console import print_info, print_steps, print_success, print_warning
from gwf.errors import OperationCancelled
from gwf.versioning import BUMP_KEYWORDS, Version, parse_version
from gwf.workflows import WorkflowContext

logger = logging.getLogger(__name__)

DEFAULT_VERSION = Version(0, 1, 0)


def _start_branch(ctx: WorkflowContext, branch: str, base: str) -> None:
    ctx.repo.create_branch(branch, base)
    ctx.repo.checkout(branch)


def start_feature(ctx: WorkflowContext, name: str, from_: Optional[str] = None, push: bool = False) -> str:
    """Create and check out ``<feature prefix><name>``.

    Returns:
        The new branch name
    """
    workflows = ctx.config.workflows

    if ctx.repo.has_uncommitted_changes():
        print_warning("You have uncommitted changes.")
        if ctx.prompts.interactive:
            if not ctx.prompts.confirm("Do you want to stash them and continue?", default=True):
                raise OperationCancelled("Operation cancelled")
            print_info("Stashing changes...")
            ctx.git_checked("stash", "push", "-m", f"gwf: auto-stash before feature {name}")
        else:
            print_info("Proceeding with uncommitted changes (non-interactive mode)")

    base = from_
    if base is None:
        base = ctx.config.base_branch
        if base != workflows.main_branch and not ctx.repo.branch_exists(base):
            logger.info("Develop branch %s does not exist, using %s", base, workflows.main_branch)
            base = workflows.main_branch

    print_info(f"Creating feature branch from '{base}'")
    branch = f"{workflows.feature_branch_prefix}{name}"
    _start_branch(ctx, branch, base)
    print_success(f"Created and switched to branch '{branch}'")

    if push:
        print_info("Pushing branch to remote...")
        ctx.git_checked("push", "-u", "origin", branch)
        print_success("Branch pushed to remote")

    print_steps(
        "Next steps:",
        [
            "Make your changes",
            "Run 'gwf commit' to create a conventional commit",
            "Run 'gwf pr' to create a pull request",
        ],
    )
    return branch


def start_hotfix(ctx: WorkflowContext, name: str, target: Optional[str] = None) -> str:
    """Create and check out ``<hotfix prefix><name>`` from ``target`` or main."""
    workflows = ctx.config.workflows
    base = target or workflows.main_branch

    print_info(f"Creating hotfix from '{base}'")
    branch = f"{workflows.hotfix_branch_prefix}{name}"
    _start_branch(ctx, branch, base)
    print_success(f"Created and switched to hotfix branch '{branch}'")

    print_steps(
        "Hotfix workflow:",
        [
            "Make your emergency fixes",
            "Test thoroughly",
            "Run 'gwf commit' to commit changes",
            f"Run 'gwf pr --target {base}' to create a pull request",
            "After merge, run 'gwf release patch' to tag the release",
        ],
    )
    return branch


def last_tag(ctx: WorkflowContext) -> Optional[str]:
    """Most recent tag reachable from HEAD, or None if there is none."""
    result = ctx.git("describe", "--tags", "--abbrev=0")
    if not result.ok:
        logger.debug("git describe found no tag: %s", result.stderr.strip())
        return None
    return result.stdout.strip() or None


def resolve_release_version(ctx: WorkflowContext, version: str) -> str:
    """Turn ``major``/``minor``/``patch`` into a concrete version.

    Any other value is used verbatim, minus a leading ``v``.
    """
    if version not in BUMP_KEYWORDS:
        return version[1:] if version.startswith("v") else version

    tag = last_tag(ctx)
    current = parse_version(tag) if tag else None
    if current is None:
        logger.info("No version tag found (%s), starting at %s", tag, DEFAULT_VERSION)
        return str(DEFAULT_VERSION)
    return str(current.bump(version))


def generate_changelog(ctx: WorkflowContext, version: str) -> None:
    """Changelog generation hook; no generator is available yet."""
    print_warning("Changelog generation is not implemented yet")


def start_release(ctx: WorkflowContext, version: str, changelog: bool = False, tag: bool = False) -> str:
    """Create a release branch from main, optionally tagging the release.

    Returns:
        The resolved version string
    """
    workflows = ctx.config.workflows
    new_version = resolve_release_version(ctx, version)
    branch = f"{workflows.release_branch_prefix}{new_version}"

    print_info(f"Creating release branch '{branch}'")
    _start_branch(ctx, branch, workflows.main_branch)
    print_success(f"Created release branch '{branch}'")

    if changelog:
        print_info("Generating changelog...")
        generate_changelog(ctx, new_version)

    if tag:
        tag_name = f"v{new_version}"
        print_info(f"Creating tag {tag_name}")
        ctx.git_checked("tag", "-a", tag_name, "-m", f"Release {tag_name}")
        print_success(f"Tagged release {tag_name}")

    print_steps(
        "Next steps:",
        [
            "Update version files",
            "Update CHANGELOG.md",
            "Run 'gwf pr' to create a release PR",
            "After merge, push tags with 'git push --tags'",
        ],
    )
    return new_version
