"""External process execution.

Git operations that GitPython does not cover (rebase, stash, bisect, tag
pushes, ...) and third-party tools like ``gh`` go through an
``ExternalProcess``. Workflows receive one as a value so tests can swap in a
fake that records calls and returns canned results.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from gwf.errors import SubprocessFailure

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Exit status and captured output of one command."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def check(self) -> "ProcessResult":
        """Raise ``SubprocessFailure`` unless the command succeeded."""
        if not self.ok:
            raise SubprocessFailure(self.command, self.stderr or self.stdout, self.returncode)
        return self


class ExternalProcess(Protocol):
    """Capability for running external commands."""

    def run(
        self,
        command: str,
        args: Sequence[str] = (),
        cwd: Optional[Path] = None,
        capture: bool = True,
    ) -> ProcessResult:
        """Run ``command`` with ``args`` and wait for it to finish.

        With ``capture=False`` the command inherits the terminal (editors,
        ``git bisect run`` progress) and the result carries no output.
        """
        ...

    def which(self, command: str) -> Optional[str]:
        """Return the full path of ``command`` if it is on PATH."""
        ...


class SubprocessRunner:
    """``ExternalProcess`` backed by :mod:`subprocess`."""

    def __init__(self, cwd: Optional[Path] = None) -> None:
        self.cwd = cwd

    def run(
        self,
        command: str,
        args: Sequence[str] = (),
        cwd: Optional[Path] = None,
        capture: bool = True,
    ) -> ProcessResult:
        cmd = [command, *args]
        workdir = cwd or self.cwd
        logger.debug("Running %s (cwd=%s)", " ".join(cmd), workdir or ".")
        try:
            completed = subprocess.run(
                cmd,
                cwd=workdir,
                check=False,
                text=True,
                capture_output=capture,
            )
        except OSError as err:
            raise SubprocessFailure(cmd, f"failed to execute {command}: {err}", 127) from err

        result = ProcessResult(
            command=cmd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if not result.ok:
            logger.debug("%s exited with %s: %s", " ".join(cmd), result.returncode, result.stderr.strip())
        return result

    def which(self, command: str) -> Optional[str]:
        return shutil.which(command)


def run_git(runner: ExternalProcess, *args: str, cwd: Optional[Path] = None) -> str:
    """Run a git command, raise on failure and return stripped stdout."""
    return runner.run("git", list(args), cwd=cwd).check().stdout.strip()
