"""Git repository operations."""

from enum import Enum
from pathlib import Path
from typing import Protocol

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from lopper.logging_config import get_logger

logger = get_logger(__name__)


class BranchScope(Enum):
    """Which branches `git branch` should list."""

    ALL = "--all"
    REMOTE = "--remotes"
    LOCAL = "--list"


class GitError(Exception):
    """Git operation error."""


class GitBackend(Protocol):
    """Repository queries and mutations the pruner relies on."""

    def list_branches(self, scope: BranchScope) -> list[str]: ...

    def list_remotes(self) -> list[str]: ...

    def fetch(self, remote: str) -> None: ...

    def commits_in_range(self, base: str, branch: str) -> list[str]: ...

    def delete_local(self, branch: str) -> None: ...

    def delete_remote(self, remote: str, branch: str) -> None: ...


class GitRepo:
    """Git repository operations.

    Every call shells out to git once. A failing call is logged and treated
    as if git printed nothing, so a run never stops halfway through.
    """

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    def _run(self, command: str, *args: str) -> str:
        """Run a git subcommand and return its output, or "" if it failed."""
        logger.debug("git %s %s", command.replace("_", "-"), " ".join(args))
        try:
            return str(getattr(self.repo.git, command)(*args))
        except GitCommandError as err:
            logger.warning("git %s failed: %s", command.replace("_", "-"), (err.stderr or str(err)).strip())
            return ""

    def list_branches(self, scope: BranchScope) -> list[str]:
        """List branches in the given scope, one raw `git branch` line each."""
        return self._run("branch", "--no-color", scope.value).splitlines()

    def list_remotes(self) -> list[str]:
        """List remote names."""
        return [line.strip() for line in self._run("remote").splitlines() if line.strip()]

    def fetch(self, remote: str) -> None:
        """Fetch from a remote, pruning remote-tracking branches it no longer has."""
        self._run("fetch", "--prune", remote)

    def commits_in_range(self, base: str, branch: str) -> list[str]:
        """List commits reachable from branch but not from base."""
        return self._run("rev_list", f"{base}..{branch}").splitlines()

    def delete_local(self, branch: str) -> None:
        """Force delete a local branch."""
        # -D since the branch may not be merged into the checked out branch
        self._run("branch", "-D", branch)

    def delete_remote(self, remote: str, branch: str) -> None:
        """Delete a branch on a remote by pushing an empty reference."""
        self._run("push", remote, f":{branch}")
