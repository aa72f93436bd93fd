"""Git repository operations."""

import logging
from pathlib import Path
from typing import Optional

from git import Commit, GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from gwf.errors import AlreadyExists, BranchNotFound, DetachedHead, GitError, NotARepository, RemoteNotFound

logger = logging.getLogger(__name__)


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Open the repository containing ``path``.

        Raises:
            NotARepository: If no working tree is found at or above ``path``
        """
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as err:
            raise NotARepository(f"Not a git repository: {path}") from err
        except (GitCommandError, ValueError) as err:
            raise NotARepository(f"Failed to open repository: {err}") from err
        if self.repo.bare:
            raise NotARepository("Cannot operate on bare repository")

    @property
    def root(self) -> Path:
        """Top-level directory of the working tree."""
        return Path(self.repo.working_tree_dir)

    def current_branch(self) -> str:
        """Get the branch HEAD points to.

        Raises:
            DetachedHead: If HEAD is not a branch reference
        """
        try:
            return self.repo.active_branch.name
        except TypeError as err:
            raise DetachedHead() from err

    def list_branches(self, include_remote: bool = False) -> list[str]:
        """List local branch names, or remote-tracking names if ``include_remote``."""
        if not include_remote:
            return [head.name for head in self.repo.heads]
        try:
            output = self.repo.git.branch("-r", "--format=%(refname:short)")
        except GitCommandError as err:
            raise GitError(f"Failed to list remote branches: {err}") from err
        # Skip symbolic remote HEADs, which show up as "origin/HEAD" or bare "origin"
        return [name for name in output.splitlines() if "/" in name and not name.endswith("/HEAD")]

    def list_remotes(self) -> list[str]:
        return [remote.name for remote in self.repo.remotes]

    def list_tags(self) -> list[str]:
        return [tag.name for tag in self.repo.tags]

    def branch_exists(self, name: str, remote: bool = False) -> bool:
        if remote:
            return name in self.list_branches(include_remote=True)
        return name in self.repo.heads

    def _head_commit(self, name: str) -> Commit:
        if name not in self.repo.heads:
            raise BranchNotFound(name)
        return self.repo.heads[name].commit

    def create_branch(self, name: str, from_: Optional[str] = None) -> None:
        """Create ``name`` at the tip of local branch ``from_``, or at HEAD.

        Raises:
            BranchNotFound: If ``from_`` does not exist
            AlreadyExists: If ``name`` is already a branch
        """
        if name in self.repo.heads:
            raise AlreadyExists(name)
        if from_ is not None:
            commit = self._head_commit(from_)
        else:
            try:
                commit = self.repo.head.commit
            except ValueError as err:
                # Unborn HEAD, nothing committed yet
                raise GitError("Cannot create a branch before the first commit") from err
        try:
            self.repo.create_head(name, commit)
        except GitCommandError as err:
            raise GitError(f"Failed to create branch '{name}': {err}") from err
        logger.info("Created branch %s at %s", name, commit.hexsha[:8])

    def checkout(self, name: str) -> None:
        """Switch the working tree and HEAD to local branch ``name``."""
        if name not in self.repo.heads:
            raise BranchNotFound(name)
        try:
            self.repo.heads[name].checkout()
        except GitCommandError as err:
            raise GitError(f"Failed to checkout '{name}': {err.stderr.strip() or err}") from err
        logger.info("Checked out %s", name)

    def head_ref(self) -> str:
        """Branch HEAD points to, or the commit SHA when HEAD is detached."""
        if self.repo.head.is_detached:
            return self.repo.head.commit.hexsha
        return self.repo.active_branch.name

    def restore_head(self, ref: str) -> None:
        """Return HEAD to a value previously taken from ``head_ref``."""
        if ref in self.repo.heads:
            self.checkout(ref)
            return
        try:
            self.repo.git.checkout("--detach", ref)
        except GitCommandError as err:
            raise GitError(f"Failed to checkout '{ref[:8]}': {err.stderr.strip() or err}") from err
        logger.info("Detached HEAD at %s", ref[:8])

    def has_uncommitted_changes(self) -> bool:
        """Check if the index or working tree differs from HEAD."""
        try:
            return self.repo.is_dirty(index=True, working_tree=True, untracked_files=False)
        except GitCommandError as err:
            raise GitError(f"Failed to get repository status: {err}") from err

    def is_branch_merged(self, branch: str, into: str) -> bool:
        """Check whether ``branch`` has no commits that ``into`` lacks.

        That is the case exactly when the merge-base of the two branches is
        the tip of ``branch``.
        """
        tip = self._head_commit(branch)
        target = self._head_commit(into)
        try:
            bases = self.repo.merge_base(tip, target)
        except GitCommandError as err:
            raise GitError(f"Failed to find merge base of '{branch}' and '{into}': {err}") from err
        return tip in bases

    def delete_branch(self, name: str) -> None:
        """Delete local branch ``name``.

        Always forced: callers decide whether the branch is safe to delete.
        """
        if name not in self.repo.heads:
            raise BranchNotFound(name)
        try:
            self.repo.delete_head(name, force=True)
        except GitCommandError as err:
            raise GitError(f"Failed to delete branch '{name}': {err.stderr.strip() or err}") from err
        logger.info("Deleted branch %s", name)

    def fetch(self, remote: str = "origin", prune: bool = False) -> None:
        """Fetch ``remote``, optionally pruning stale remote-tracking refs."""
        if remote not in self.list_remotes():
            raise RemoteNotFound(remote)
        try:
            self.repo.remote(remote).fetch(prune=prune)
        except GitCommandError as err:
            raise GitError(f"Failed to fetch from {remote}: {err.stderr.strip() or err}") from err
        logger.info("Fetched %s%s", remote, " (pruned)" if prune else "")

    def remote_url(self, remote: str = "origin") -> str:
        if remote not in self.list_remotes():
            raise RemoteNotFound(remote)
        return self.repo.remote(remote).url

    def commits(self, rev: str = "HEAD") -> list[Commit]:
        """All commits reachable from ``rev``, newest first."""
        try:
            return list(self.repo.iter_commits(rev))
        except (GitCommandError, ValueError) as err:
            raise GitError(f"Failed to read history of {rev}: {err}") from err

    def status_entries(self) -> list[tuple[str, str]]:
        """Porcelain status as (two-letter code, path) pairs."""
        try:
            output = self.repo.git.status("--porcelain")
        except GitCommandError as err:
            raise GitError(f"Failed to get repository status: {err}") from err
        return [(line[:2], line[3:]) for line in output.splitlines() if line.strip()]

    def ahead_behind(self, branch: str, upstream: str) -> tuple[int, int]:
        """Count commits ``branch`` is ahead of and behind ``upstream``."""
        try:
            output = self.repo.git.rev_list("--left-right", "--count", f"{branch}...{upstream}")
        except GitCommandError as err:
            raise GitError(f"Failed to compare '{branch}' with '{upstream}': {err}") from err
        ahead, behind = output.split()
        return int(ahead), int(behind)

    def get_branch_last_commit(self, branch_name: str) -> str:
        """Get the last commit timestamp for a branch."""
        try:
            return str(
                self.repo.git.log(
                    "-1",
                    "--format=%cd",
                    "--date=format:'%a - %B %d @ %H:%M'",
                    branch_name,
                ).strip("'")
            )
        except GitCommandError:
            return ""
