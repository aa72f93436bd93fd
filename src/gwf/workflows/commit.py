"""Conventional commits."""

from typing import Optional

from gwf.console import print_info, print_success
from gwf.workflows import WorkflowContext

COMMIT_TYPES = (
    ("feat", "A new feature"),
    ("fix", "A bug fix"),
    ("docs", "Documentation only changes"),
    ("style", "Changes that do not affect the meaning of the code"),
    ("refactor", "A code change that neither fixes a bug nor adds a feature"),
    ("perf", "A code change that improves performance"),
    ("test", "Adding missing tests or correcting existing tests"),
    ("chore", "Changes to the build process or auxiliary tools"),
)


def build_conventional_message(
    commit_type: str,
    description: str,
    scope: str = "",
    body: str = "",
    breaking: str = "",
) -> str:
    """Assemble ``type(scope): description`` with optional body and footer."""
    header = f"{commit_type}({scope}): {description}" if scope else f"{commit_type}: {description}"
    parts = [header]
    if body:
        parts.append(body)
    if breaking:
        parts.append(f"BREAKING CHANGE: {breaking}")
    return "\n\n".join(parts)


def prompt_conventional_message(ctx: WorkflowContext) -> str:
    labels = [f"{name}: {description}" for name, description in COMMIT_TYPES]
    commit_type = COMMIT_TYPES[ctx.prompts.select("Select commit type", labels, default=0)][0]
    scope = ctx.prompts.text("Scope (optional)", allow_empty=True)
    description = ctx.prompts.text("Description")
    body = ctx.prompts.text("Body (optional)", allow_empty=True)
    breaking = ctx.prompts.text("Breaking change (optional)", allow_empty=True)
    return build_conventional_message(commit_type, description, scope=scope, body=body, breaking=breaking)


def suggest_message(ctx: WorkflowContext) -> Optional[str]:
    """AI commit message hook; no provider is wired up yet."""
    return None


def commit_args(ctx: WorkflowContext, message: str, amend: bool = False) -> list[str]:
    settings = ctx.config.commits
    args = ["commit"]
    if amend:
        args.append("--amend")
    if settings.sign_commits:
        args.append(f"--gpg-sign={settings.gpg_key}" if settings.gpg_key else "-S")
    args += ["-m", message]
    return args


def commit(ctx: WorkflowContext, message: Optional[str] = None, ai: bool = False, amend: bool = False) -> Optional[str]:
    """Create a commit, prompting for a conventional message when none is given.

    Returns:
        The commit message used, or None if nothing was committed
    """
    if ai:
        message = suggest_message(ctx)
        if message is None:
            print_info("AI-powered commit messages are not yet implemented")
            return None

    if message is None:
        if ctx.config.commits.conventional:
            message = prompt_conventional_message(ctx)
        else:
            message = ctx.prompts.text("Commit message")

    print_info("Creating commit...")
    ctx.git_checked(*commit_args(ctx, message, amend=amend))
    print_success(f"Commit created: {message.splitlines()[0] if message else ''}")
    return message
