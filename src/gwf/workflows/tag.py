"""Interactive semantic-version tagging."""

from dataclasses import dataclass
from typing import Optional

from rich.markup import escape

from gwf.console import console, print_success, print_warning
from gwf.versioning import Version, latest_version, parse_version
from gwf.workflows import WorkflowContext

BASELINE = Version(0, 1, 0)

CHOICES = (
    "Major version (breaking changes)",
    "Minor version (new features)",
    "Patch version (bug fixes)",
    "Custom version",
    "List tags",
    "Cancel",
)
DEFAULT_CHOICE = 2
_BUMPS = {0: "major", 1: "minor", 2: "patch"}


@dataclass
class TagState:
    """Existing tags and the highest version among them."""

    tags: list[str]
    latest: Version

    @property
    def suggested(self) -> Version:
        """The default offer: a patch bump."""
        return self.latest.bump("patch")


def _tag_order(name: str) -> tuple[bool, Version, str]:
    version = parse_version(name)
    return (version is not None, version or BASELINE, name)


def tag_state(ctx: WorkflowContext) -> TagState:
    # Version tags sort numerically after any other tags
    tags = sorted(ctx.repo.list_tags(), key=_tag_order)
    return TagState(tags=tags, latest=latest_version(tags) or BASELINE)


def _ask_custom(ctx: WorkflowContext) -> Version:
    while True:
        answer = ctx.prompts.text("Enter version (without v prefix)")
        try:
            return Version.parse(answer)
        except ValueError as err:
            print_warning(str(err))


def tag(ctx: WorkflowContext) -> Optional[str]:
    """Offer a version bump, create the annotated tag and optionally push it.

    Returns:
        The created tag name, or None if nothing was tagged
    """
    state = tag_state(ctx)
    if state.tags:
        console.print(f"[cyan]Latest version:[/cyan] [yellow]v{state.latest}[/yellow]")

    choice = ctx.prompts.select("What kind of release?", CHOICES, default=DEFAULT_CHOICE)
    if choice in _BUMPS:
        new_version = state.latest.bump(_BUMPS[choice])
    elif choice == 3:
        new_version = _ask_custom(ctx)
    elif choice == 4:
        if not state.tags:
            print_warning("No tags found")
        else:
            console.print("\n[bright_blue]Existing tags:[/bright_blue]")
            for name in list(reversed(state.tags))[:10]:
                console.print(f"  [green]{escape(name)}[/green]")
        return None
    else:
        return None

    tag_name = new_version.tag
    console.print(f"\n[cyan]Creating tag:[/cyan] [yellow]{tag_name}[/yellow]")
    message = ctx.prompts.text("Tag message", default=f"Release {new_version}")
    push = ctx.prompts.confirm("Push tag to remote?", default=True)

    ctx.git_checked("tag", "-a", tag_name, "-m", message)
    print_success(f"Created tag: {tag_name}")

    if push:
        ctx.git_checked("push", "origin", tag_name)
        print_success("Tag pushed to remote")
    return tag_name
