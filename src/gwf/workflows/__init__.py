"""Workflow commands.

Each workflow is a plain function taking a ``WorkflowContext`` plus its own
arguments. The CLI builds the context once per invocation; tests build it
with a fake process runner and scripted input.
"""

from dataclasses import dataclass

from gwf.config import Config
from gwf.git import GitRepo
from gwf.process import ExternalProcess, ProcessResult, run_git
from gwf.prompts import UserInput


@dataclass
class WorkflowContext:
    """Everything a workflow needs for one invocation."""

    repo: GitRepo
    config: Config
    runner: ExternalProcess
    prompts: UserInput

    def git(self, *args: str) -> ProcessResult:
        """Run ``git`` in the repository root without checking the exit code."""
        return self.runner.run("git", list(args), cwd=self.repo.root)

    def git_checked(self, *args: str) -> str:
        """Run ``git``, raise ``SubprocessFailure`` on error and return stdout."""
        return run_git(self.runner, *args, cwd=self.repo.root)
