"""Tests for external process execution."""

import subprocess
from pathlib import Path
from typing import Any

import pytest

from gwf.errors import SubprocessFailure
from gwf.process import ProcessResult, SubprocessRunner, run_git

from fakes import FakeProcess


def test_run_captures_output(test_repo: Path) -> None:
    """Test that stdout is captured and the exit code reported."""
    result = SubprocessRunner().run("git", ["rev-parse", "--abbrev-ref", "HEAD"], cwd=test_repo)
    assert result.ok
    assert result.stdout.strip() == "feature/current"
    assert result.command == ["git", "rev-parse", "--abbrev-ref", "HEAD"]


def test_run_git_raises_on_failure(test_repo: Path) -> None:
    """Test that run_git turns a non-zero exit into SubprocessFailure."""
    with pytest.raises(SubprocessFailure) as exc_info:
        run_git(SubprocessRunner(), "checkout", "no-such-branch", cwd=test_repo)
    assert exc_info.value.returncode != 0
    assert exc_info.value.command == ["git", "checkout", "no-such-branch"]
    assert "no-such-branch" in exc_info.value.stderr


def test_run_uses_default_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test that the runner's working directory is used when none is given."""
    seen: dict[str, Any] = {}

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        seen.update(kwargs, cmd=cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="ok\n", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    result = SubprocessRunner(cwd=tmp_path).run("tool", ["--flag"])

    assert result.stdout == "ok\n"
    assert seen["cmd"] == ["tool", "--flag"]
    assert seen["cwd"] == tmp_path
    assert seen["check"] is False


def test_missing_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a missing executable is reported as exit code 127."""

    def fake_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(SubprocessFailure) as exc_info:
        SubprocessRunner().run("definitely-not-installed")
    assert exc_info.value.returncode == 127


def test_check_uses_stdout_when_stderr_empty() -> None:
    """Test the failure message falls back to stdout."""
    result = ProcessResult(["git", "merge"], 1, stdout="CONFLICT in a.txt", stderr="")
    with pytest.raises(SubprocessFailure, match="CONFLICT in a.txt"):
        result.check()


def test_which() -> None:
    assert SubprocessRunner().which("git")
    assert SubprocessRunner().which("definitely-not-installed") is None


def test_git_checked_uses_run_git(test_repo: Path, make_ctx) -> None:
    """Test that workflow git calls raise on failure and return stripped stdout."""
    runner = FakeProcess()
    runner.respond(["git", "rev-parse"], stdout="abc123\n")
    runner.fail(["git", "push"], stderr="rejected")
    ctx = make_ctx(test_repo, runner=runner)

    assert ctx.git_checked("rev-parse", "HEAD") == "abc123"
    with pytest.raises(SubprocessFailure, match="rejected"):
        ctx.git_checked("push")
