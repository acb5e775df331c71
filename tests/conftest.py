"""Test configuration and fixtures."""

import io
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest
from git import Actor, Repo
from rich.console import Console

from lopper.git import BranchScope
from lopper.options import Options
from lopper.pruner import RunContext


class FakeGit:
    """Scripted stand-in for GitRepo that records every call."""

    def __init__(
        self,
        branches: list[str],
        remotes: Optional[list[str]] = None,
        unmerged: Optional[dict[str, list[str]]] = None,
    ) -> None:
        self.branches = branches
        self.remotes = ["origin"] if remotes is None else remotes
        self.unmerged = unmerged or {}
        self.calls: list[tuple] = []

    def list_branches(self, scope: BranchScope) -> list[str]:
        self.calls.append(("list_branches", scope))
        return list(self.branches)

    def list_remotes(self) -> list[str]:
        self.calls.append(("list_remotes",))
        return list(self.remotes)

    def fetch(self, remote: str) -> None:
        self.calls.append(("fetch", remote))

    def commits_in_range(self, base: str, branch: str) -> list[str]:
        self.calls.append(("commits_in_range", base, branch))
        return list(self.unmerged.get(branch, []))

    def delete_local(self, branch: str) -> None:
        self.calls.append(("delete_local", branch))

    def delete_remote(self, remote: str, branch: str) -> None:
        self.calls.append(("delete_remote", remote, branch))


@pytest.fixture
def fake_git() -> type[FakeGit]:
    """Give tests the FakeGit class."""
    return FakeGit


@pytest.fixture
def make_context() -> Callable[..., RunContext]:
    """Build a RunContext around a FakeGit, capturing console output."""

    def _make(git: FakeGit, options: Optional[Options] = None, **kwargs) -> RunContext:
        console = Console(file=io.StringIO(), width=200)
        return RunContext(git=git, options=options or Options(), console=console, **kwargs)

    return _make


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    The local repository has develop checked out and these branches:
      - feature/merged: merged into develop, pushed (old locally and on origin)
      - feature/active: one commit not in develop, pushed
      - feature/empty: no commits of its own, local only
      - release: no commits of its own, local only

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    def commit_file(name: str, content: str) -> None:
        file_name = f"{name.replace('/', '_')}.txt"
        (local_path / file_name).write_text(content)
        local_repo.index.add([file_name])
        local_repo.index.commit(f"Add {name}", author=author)

    commit_file("README", "# Test Repository")
    local_repo.git.branch("-M", "develop")

    origin = local_repo.create_remote("origin", url=str(remote_path))
    local_repo.git.push("origin", "develop")
    origin.fetch()

    def create_branch(name: str, commit: bool = True, push: bool = False, merge: bool = False) -> None:
        """Create a branch off develop."""
        local_repo.git.checkout("develop")
        local_repo.git.checkout("-b", name)
        if commit:
            commit_file(name, f"{name} content")
        if push:
            local_repo.git.push("origin", name)
        if merge:
            local_repo.git.checkout("develop")
            local_repo.git.merge("--no-ff", "-m", f"Merge {name}", name)
            local_repo.git.push("origin", "develop")

    create_branch("feature/merged", push=True, merge=True)
    create_branch("feature/active", push=True)
    create_branch("feature/empty", commit=False)
    create_branch("release", commit=False)

    local_repo.git.checkout("develop")

    yield local_path, remote_path
