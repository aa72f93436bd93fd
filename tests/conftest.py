"""Test configuration and fixtures."""

from pathlib import Path
from typing import Callable, Generator, Optional

import pytest
from git import Actor, Repo

from gwf.config import Config
from gwf.console import console
from gwf.git import GitRepo
from gwf.process import ExternalProcess
from gwf.prompts import UserInput
from gwf.workflows import WorkflowContext

from fakes import FakeProcess, ScriptedInput

AUTHOR = Actor("Test User", "test@example.com")


def commit_file(repo: Repo, name: str, content: str, message: Optional[str] = None) -> None:
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    repo.index.commit(message or f"Add {name}", author=AUTHOR, committer=AUTHOR)


def _init_repo(path: Path) -> Repo:
    repo = Repo.init(path, initial_branch="main")
    with repo.config_writer() as writer:
        writer.set_value("user", "name", AUTHOR.name)
        writer.set_value("user", "email", AUTHOR.email)
    return repo


@pytest.fixture(autouse=True)
def _reset_console() -> Generator[None, None, None]:
    yield
    console.quiet = False


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    Local branches:
        main              initial commit plus the merge of feature/merged
        develop           at main's tip, protected by default
        feature/merged    merged into main with a merge commit
        feature/behind    no commits of its own (ancestor of main), never pushed
        feature/unmerged  one commit not in main
        feature/current   one commit not in main, checked out

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True, initial_branch="main")
    local_repo = _init_repo(local_path)

    commit_file(local_repo, "README.md", "# Test Repository", "Initial commit")
    main_branch = local_repo.heads.main

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    main_branch.set_tracking_branch(origin.refs.main)

    def create_branch(name: str, content: Optional[str] = None, merge: bool = False, push: bool = True) -> None:
        """Create a branch off main, optionally with a commit of its own."""
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()
        if content is not None:
            commit_file(local_repo, f"{name}.txt", content)
        if push:
            origin.push(name)
            branch.set_tracking_branch(origin.refs[name])
        if merge:
            main_branch.checkout()
            local_repo.git.merge(name, "--no-ff", "-m", f"Merge {name}")
            origin.push("main")

    create_branch("feature/behind", push=False)
    create_branch("feature/merged", "Merged branch content", merge=True)
    create_branch("develop")
    create_branch("feature/unmerged", "Unmerged branch content")
    create_branch("feature/current", "Current branch content")

    yield local_path, remote_path


@pytest.fixture
def test_repo(test_env: tuple[Path, Path]) -> Path:
    local_path, _ = test_env
    return local_path


@pytest.fixture
def single_branch_repo(tmp_path: Path) -> Path:
    """A repository with one commit on main and nothing else."""
    path = tmp_path / "single"
    path.mkdir()
    repo = _init_repo(path)
    commit_file(repo, "README.md", "# Single", "Initial commit")
    return path


@pytest.fixture
def fake_process() -> FakeProcess:
    return FakeProcess()


@pytest.fixture
def make_ctx() -> Callable[..., WorkflowContext]:
    """Build a ``WorkflowContext`` for a repository path."""

    def _make(
        path: Path,
        runner: Optional[ExternalProcess] = None,
        prompts: Optional[UserInput] = None,
        config: Optional[Config] = None,
    ) -> WorkflowContext:
        return WorkflowContext(
            repo=GitRepo(path),
            config=config or Config(),
            runner=runner or FakeProcess(),
            prompts=prompts or ScriptedInput(),
        )

    return _make
