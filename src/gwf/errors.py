"""Exception types used across gwf.

The CLI catches ``GwfError`` and turns it into a diagnostic plus a non-zero
exit code. Anything else is a bug and is left to propagate.
"""

from typing import Sequence


class GwfError(Exception):
    """Base class for all gwf errors."""


class ConfigParseError(GwfError):
    """Configuration file could not be parsed or validated."""


class NonInteractiveInputRequired(GwfError):
    """A prompt was needed but no terminal is attached."""

    def __init__(self, prompt: str) -> None:
        super().__init__(f"Input required but no terminal is attached: {prompt}")
        self.prompt = prompt


class OperationCancelled(GwfError):
    """User declined to continue."""


class GitError(GwfError):
    """Git operation error."""


class NotARepository(GitError):
    """Path is not inside a usable git working tree."""


class DetachedHead(GitError):
    """HEAD does not point to a branch."""

    def __init__(self) -> None:
        super().__init__("HEAD is not pointing to a branch (detached HEAD state)")


class BranchNotFound(GitError):
    """Branch does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Branch '{name}' not found")
        self.name = name


class AlreadyExists(GitError):
    """Branch or tag name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Branch '{name}' already exists")
        self.name = name


class RemoteNotFound(GitError):
    """Remote is not configured."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Remote '{name}' not found")
        self.name = name


class SubprocessFailure(GitError):
    """External command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], stderr: str, returncode: int = 1) -> None:
        self.command = list(command)
        self.stderr = stderr.strip()
        self.returncode = returncode
        message = f"'{' '.join(self.command)}' failed with exit code {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)
