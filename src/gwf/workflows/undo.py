"""Undo the last commit or merge."""

from typing import Optional

from gwf.console import print_success, print_warning
from gwf.workflows import WorkflowContext

# (label, git arguments, needs confirmation)
UNDO_ACTIONS = (
    ("Undo last commit (keep changes)", ("reset", "--soft", "HEAD~1"), False),
    ("Undo last commit (discard changes)", ("reset", "--hard", "HEAD~1"), True),
    ("Undo last merge", ("reset", "--hard", "ORIG_HEAD"), True),
    ("Abort current merge", ("merge", "--abort"), False),
)

_DONE = (
    "Last commit undone, changes kept",
    "Last commit undone, changes discarded",
    "Last merge undone",
    "Merge aborted",
)


def undo(ctx: WorkflowContext, choice: Optional[int] = None) -> bool:
    """Run one undo action; returns whether anything was changed."""
    labels = [label for label, _, _ in UNDO_ACTIONS] + ["Cancel"]
    if choice is None:
        choice = ctx.prompts.select("What do you want to undo?", labels, default=0)
    if not 0 <= choice < len(UNDO_ACTIONS):
        print_warning("Cancelled")
        return False

    _, args, destructive = UNDO_ACTIONS[choice]
    if destructive and not ctx.prompts.confirm("This will discard all changes. Are you sure?", default=False):
        print_warning("Cancelled")
        return False

    ctx.git_checked(*args)
    print_success(_DONE[choice])
    return True
