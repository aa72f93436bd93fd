"""Guided ``git bisect`` sessions.

The bisect state (revision under test, candidates left) lives in git's own
bisect log; this module only issues the transitions and reports git's answer.
"""

import re
from typing import Optional

from rich.markup import escape

from gwf.console import console, print_info, print_success
from gwf.workflows import WorkflowContext

ACTIONS = ("start", "good", "bad", "skip", "reset", "run")

ACTION_LABELS = (
    "Start bisect",
    "Mark as good",
    "Mark as bad",
    "Skip current",
    "Reset bisect",
    "Automated bisect with script",
)

_FIRST_BAD_RE = re.compile(r"^([0-9a-f]{7,40}) is the first bad commit", re.MULTILINE)


def first_bad_commit(output: str) -> Optional[str]:
    """Extract the culprit hash from ``git bisect`` output."""
    match = _FIRST_BAD_RE.search(output)
    return match.group(1) if match else None


def _report(output: str) -> Optional[str]:
    """Show git's progress line and return the first bad commit once found."""
    culprit = first_bad_commit(output)
    if culprit:
        console.print(f"[yellow]First bad commit:[/yellow] {culprit}")
        return culprit
    for line in output.splitlines():
        if line.startswith("Bisecting:"):
            console.print(f"[cyan]{escape(line)}[/cyan]")
            break
    return None


def _start(ctx: WorkflowContext, bad: Optional[str], good: Optional[str]) -> str:
    if bad is None:
        bad = ctx.prompts.text("Bad commit (or press enter for HEAD)", default="HEAD")
    if good is None:
        good = ctx.prompts.text("Good commit")
    ctx.git_checked("bisect", "start")
    ctx.git_checked("bisect", "bad", bad)
    return ctx.git_checked("bisect", "good", good)


def bisect(
    ctx: WorkflowContext,
    action: Optional[str] = None,
    bad: Optional[str] = None,
    good: Optional[str] = None,
    script: Optional[str] = None,
) -> Optional[str]:
    """Perform one bisect transition.

    Args:
        ctx: Workflow context
        action: One of ``ACTIONS``; asked interactively when omitted
        bad: Bad endpoint for ``start``/``run`` (prompted, default HEAD)
        good: Good endpoint for ``start``/``run`` (prompted)
        script: Test script for ``run`` (prompted)

    Returns:
        The first bad commit when the session has converged, else None
    """
    if action is None:
        action = ACTIONS[ctx.prompts.select("Bisect action", ACTION_LABELS, default=0)]
    if action not in ACTIONS:
        raise ValueError(f"Unknown bisect action: {action}")

    if action == "start":
        output = _start(ctx, bad, good)
        print_success("Bisect started. Test and mark commits as good/bad.")
        return _report(output)

    if action in ("good", "bad", "skip"):
        return _report(ctx.git_checked("bisect", action))

    if action == "reset":
        ctx.git_checked("bisect", "reset")
        print_success("Bisect reset")
        return None

    if script is None:
        script = ctx.prompts.text("Test script path")
    if ctx.prompts.interactive and not ctx.prompts.confirm("Start automated bisect?", default=True):
        return None

    print_info("Starting automated bisect...")
    _start(ctx, bad, good)
    output = ctx.git_checked("bisect", "run", script)
    console.print(output, markup=False, highlight=False)
    culprit = first_bad_commit(output)
    if culprit:
        print_success("Bisect completed!")
        console.print(f"[yellow]First bad commit:[/yellow] {culprit}")
    print_info("Run 'gwf bisect reset' to end the session")
    return culprit
