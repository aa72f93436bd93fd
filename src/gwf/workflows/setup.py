"""Repository initialization and configuration management.

These run without a loaded configuration so that a broken ``.gwf.toml`` can
still be shown, edited or reset.
"""

import os
import shlex
from pathlib import Path

from rich.markup import escape
from rich.syntax import Syntax

from gwf.config import CONFIG_FILENAME, Config, config_path, save_config
from gwf.console import console, print_heading, print_info, print_steps, print_success
from gwf.errors import DetachedHead, GwfError
from gwf.git import GitRepo
from gwf.process import ExternalProcess


def _ignore_config_file(root: Path) -> bool:
    """Append the config file to an existing .gitignore; returns whether it changed."""
    gitignore = root / ".gitignore"
    if not gitignore.exists():
        return False
    content = gitignore.read_text(encoding="utf-8")
    if CONFIG_FILENAME in content.splitlines():
        return False
    if content and not content.endswith("\n"):
        content += "\n"
    gitignore.write_text(f"{content}# gwf configuration\n{CONFIG_FILENAME}\n", encoding="utf-8")
    return True


def init(repo: GitRepo, force: bool = False) -> Path:
    """Write a default ``.gwf.toml`` into the repository root."""
    console.print("[bright_blue]Initializing gwf in current repository...[/bright_blue]")
    path = config_path(repo.root)
    if path.exists() and not force:
        raise GwfError("gwf is already initialized. Use --force to reinitialize.")

    save_config(Config(), repo.root)
    if _ignore_config_file(repo.root):
        print_success(f"Added {CONFIG_FILENAME} to .gitignore")

    try:
        branch = repo.current_branch()
    except DetachedHead:
        branch = "(detached)"
    remotes = repo.list_remotes()

    print_heading("Repository Information:")
    remote_list = f"[bright_cyan]{escape(', '.join(remotes))}[/bright_cyan]" if remotes else "[red]none[/red]"
    console.print(f"  Current branch: [bright_yellow]{escape(branch)}[/bright_yellow]")
    console.print(f"  Remotes: {remote_list}")

    console.print()
    print_success("gwf initialized successfully!")
    print_steps(
        "Next steps:",
        [
            f"Review and customize {CONFIG_FILENAME}",
            "Run 'gwf feature <name>' to start a new feature",
            "Run 'gwf --help' to see all available commands",
        ],
    )
    return path


def reset_config(repo: GitRepo) -> Path:
    print_info("Resetting configuration to defaults...")
    path = save_config(Config(), repo.root)
    print_success("Configuration reset to defaults")
    return path


def edit_config(repo: GitRepo, runner: ExternalProcess) -> None:
    """Open the configuration file in ``$EDITOR``."""
    path = config_path(repo.root)
    if not path.exists():
        save_config(Config(), repo.root)
    editor = os.environ.get("EDITOR") or "vi"
    print_info(f"Opening configuration in {editor}...")
    command, *args = shlex.split(editor)
    runner.run(command, [*args, str(path)], cwd=repo.root, capture=False).check()
    print_success("Configuration edited")


def show_config(repo: GitRepo) -> bool:
    """Print the configuration file; returns False when there is none."""
    path = config_path(repo.root)
    if not path.exists():
        print_info("No configuration file found. Run 'gwf init' to create one.")
        return False
    print_heading("Current configuration:")
    console.print(Syntax(path.read_text(encoding="utf-8"), "toml", background_color="default"))
    return True
