"""Tests for feature, hotfix and release branches."""

from pathlib import Path
from typing import Callable

import pytest

from gwf.config import Config, WorkflowConfig
from gwf.errors import AlreadyExists, BranchNotFound, OperationCancelled
from gwf.prompts import NonInteractiveInput
from gwf.workflows import WorkflowContext
from gwf.workflows.branches import resolve_release_version, start_feature, start_hotfix, start_release

from fakes import FakeProcess, ScriptedInput

MakeCtx = Callable[..., WorkflowContext]


def test_feature_from_develop(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that features start from develop when it exists."""
    ctx = make_ctx(test_repo)
    branch = start_feature(ctx, "login")

    assert branch == "feature/login"
    assert ctx.repo.current_branch() == "feature/login"
    assert ctx.repo.repo.heads["feature/login"].commit == ctx.repo.repo.heads.develop.commit


def test_feature_falls_back_to_main(single_branch_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that features start from main when develop does not exist."""
    ctx = make_ctx(single_branch_repo)
    start_feature(ctx, "login")
    assert ctx.repo.repo.heads["feature/login"].commit == ctx.repo.repo.heads.main.commit


def test_feature_without_develop_configured(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that an unset develop branch means main."""
    config = Config(workflows=WorkflowConfig(develop_branch=None))
    ctx = make_ctx(test_repo, config=config)
    ctx.repo.repo.heads.develop.commit = ctx.repo.repo.heads["feature/unmerged"].commit

    start_feature(ctx, "login")

    assert ctx.repo.repo.heads["feature/login"].commit == ctx.repo.repo.heads.main.commit


def test_feature_from_explicit_base(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that --from overrides the default base."""
    ctx = make_ctx(test_repo)
    start_feature(ctx, "login", from_="feature/unmerged")
    assert ctx.repo.repo.heads["feature/login"].commit == ctx.repo.repo.heads["feature/unmerged"].commit


def test_feature_custom_prefix(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that the configured prefix is used."""
    config = Config(workflows=WorkflowConfig(feature_branch_prefix="feat-"))
    assert start_feature(make_ctx(test_repo, config=config), "login") == "feat-login"


def test_feature_missing_base(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that a missing base branch fails without creating anything."""
    ctx = make_ctx(test_repo)
    with pytest.raises(BranchNotFound):
        start_feature(ctx, "login", from_="nope")
    assert not ctx.repo.branch_exists("feature/login")
    assert ctx.repo.current_branch() == "feature/current"


def test_feature_already_exists(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that an existing branch is not overwritten."""
    with pytest.raises(AlreadyExists):
        start_feature(make_ctx(test_repo), "merged")


def test_feature_stashes_when_confirmed(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that uncommitted changes are stashed after confirmation."""
    (test_repo / "README.md").write_text("work in progress")
    runner = FakeProcess()
    prompts = ScriptedInput(True)

    start_feature(make_ctx(test_repo, runner=runner, prompts=prompts), "login")

    assert runner.git_calls() == [["stash", "push", "-m", "gwf: auto-stash before feature login"]]
    assert prompts.asked == [("confirm", "Do you want to stash them and continue?", True)]


def test_feature_cancelled_on_dirty_tree(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that declining the stash aborts the workflow."""
    (test_repo / "README.md").write_text("work in progress")
    ctx = make_ctx(test_repo, prompts=ScriptedInput(False))

    with pytest.raises(OperationCancelled):
        start_feature(ctx, "login")
    assert not ctx.repo.branch_exists("feature/login")


def test_feature_non_interactive_keeps_changes(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that without a terminal the changes are carried along."""
    (test_repo / "README.md").write_text("work in progress")
    runner = FakeProcess()
    ctx = make_ctx(test_repo, runner=runner, prompts=NonInteractiveInput())

    start_feature(ctx, "login")

    assert runner.calls == []
    assert ctx.repo.current_branch() == "feature/login"
    assert (test_repo / "README.md").read_text() == "work in progress"


def test_feature_push(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that --push publishes the branch with upstream tracking."""
    runner = FakeProcess()
    start_feature(make_ctx(test_repo, runner=runner), "login", push=True)
    assert runner.git_calls() == [["push", "-u", "origin", "feature/login"]]


def test_hotfix_from_main(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that hotfixes start from main."""
    ctx = make_ctx(test_repo)
    assert start_hotfix(ctx, "urgent") == "hotfix/urgent"
    assert ctx.repo.current_branch() == "hotfix/urgent"
    assert ctx.repo.repo.heads["hotfix/urgent"].commit == ctx.repo.repo.heads.main.commit


def test_hotfix_from_target(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that --target overrides main."""
    ctx = make_ctx(test_repo)
    start_hotfix(ctx, "urgent", target="feature/unmerged")
    assert ctx.repo.repo.heads["hotfix/urgent"].commit == ctx.repo.repo.heads["feature/unmerged"].commit


@pytest.mark.parametrize(
    ("keyword", "expected"),
    [("major", "2.0.0"), ("minor", "1.3.0"), ("patch", "1.2.4")],
)
def test_release_version_bump(test_repo: Path, make_ctx: MakeCtx, keyword: str, expected: str) -> None:
    """Test that bump keywords increment the latest tag."""
    runner = FakeProcess()
    runner.respond(["git", "describe", "--tags", "--abbrev=0"], stdout="v1.2.3\n")
    assert resolve_release_version(make_ctx(test_repo, runner=runner), keyword) == expected


def test_release_version_without_tags(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that a repository without tags starts at 0.1.0."""
    runner = FakeProcess()
    runner.fail(["git", "describe"], stderr="fatal: No names found, cannot describe anything.", returncode=128)
    assert resolve_release_version(make_ctx(test_repo, runner=runner), "minor") == "0.1.0"


def test_release_from_prerelease_tag(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that a pre-release tag is bumped instead of restarting at 0.1.0."""
    runner = FakeProcess()
    runner.respond(["git", "describe", "--tags", "--abbrev=0"], stdout="v2.0.0-rc.1\n")
    ctx = make_ctx(test_repo, runner=runner)

    assert start_release(ctx, "patch") == "2.0.1"
    assert ctx.repo.current_branch() == "release/2.0.1"


def test_release_version_explicit(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that an explicit version is used as given, minus a leading v."""
    runner = FakeProcess()
    ctx = make_ctx(test_repo, runner=runner)
    assert resolve_release_version(ctx, "2.0.0-rc1") == "2.0.0-rc1"
    assert resolve_release_version(ctx, "v3.1.0") == "3.1.0"
    assert runner.calls == []


def test_release_branch_created(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that the release branch is named after the resolved version."""
    runner = FakeProcess()
    runner.respond(["git", "describe", "--tags", "--abbrev=0"], stdout="v1.2.3\n")
    ctx = make_ctx(test_repo, runner=runner)

    assert start_release(ctx, "minor") == "1.3.0"
    assert ctx.repo.current_branch() == "release/1.3.0"
    assert ctx.repo.repo.heads["release/1.3.0"].commit == ctx.repo.repo.heads.main.commit
    assert ["tag", "-a", "v1.3.0", "-m", "Release v1.3.0"] not in runner.git_calls()


def test_release_with_tag(test_repo: Path, make_ctx: MakeCtx) -> None:
    """Test that --tag creates an annotated tag for the release."""
    runner = FakeProcess()
    start_release(make_ctx(test_repo, runner=runner), "1.0.0", tag=True)
    assert runner.git_calls() == [["tag", "-a", "v1.0.0", "-m", "Release v1.0.0"]]


def test_release_with_changelog(
    test_repo: Path, make_ctx: MakeCtx, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that the changelog hook reports it is unavailable."""
    start_release(make_ctx(test_repo), "1.0.0", changelog=True)
    assert "Changelog generation is not implemented yet" in capsys.readouterr().out
