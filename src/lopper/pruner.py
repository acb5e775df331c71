"""Finding and removing branches that hold nothing the base branch lacks."""

from dataclasses import dataclass, field
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from lopper.git import BranchScope, GitBackend
from lopper.logging_config import get_logger
from lopper.options import Action, Options

logger = get_logger(__name__)

REMOTES_PREFIX = "remotes/"


def confirm_deletion(branch: str) -> bool:
    """Ask whether to delete a branch. Only "y" confirms."""
    try:
        answer = input(f"Delete the branch '{branch}'? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() == "y"


@dataclass
class RunContext:
    """Everything a single pruning run needs.

    The remote list is read from git the first time it is needed and kept
    for the rest of the run.
    """

    git: GitBackend
    options: Options
    console: Console = field(default_factory=Console)
    confirm: Callable[[str], bool] = confirm_deletion
    _remotes: Optional[list[str]] = field(default=None, init=False, repr=False)

    @property
    def remotes(self) -> list[str]:
        if self._remotes is None:
            self._remotes = self.git.list_remotes()
            logger.debug("Remotes: %s", ", ".join(self._remotes) or "none")
        return self._remotes

    def say(self, message: str) -> None:
        self.console.print(message, soft_wrap=True)


def listing_scope(options: Options) -> Optional[BranchScope]:
    """Pick which branches to list, or None when nothing is in scope."""
    if options.include_local and options.include_remote:
        return BranchScope.ALL
    if options.include_remote:
        return BranchScope.REMOTE
    if options.include_local:
        return BranchScope.LOCAL
    return None


def parse_branch_line(line: str) -> Optional[str]:
    """Turn a `git branch` output line into a branch name.

    Returns None for lines about HEAD, which is not a real branch.
    """
    if "HEAD" in line:
        return None
    name = line.strip()
    if name[:2] in ("* ", "+ "):
        name = name[2:].strip()
    if name.startswith(REMOTES_PREFIX):
        name = name[len(REMOTES_PREFIX) :]
    return name or None


def branch_remote(branch: str, remotes: list[str]) -> Optional[str]:
    """Return the remote a branch name belongs to, if any.

    When several remotes match, the longest name wins so that a remote called
    "origin/mirror" is not mistaken for "origin".
    """
    matches = [remote for remote in remotes if branch.startswith(f"{remote}/")]
    if not matches:
        return None
    return max(matches, key=len)


def find_candidate_branches(ctx: RunContext) -> list[str]:
    """List the branches to check, in the order git reports them."""
    options = ctx.options
    ctx.say("Identifying branches...")
    scope = listing_scope(options)
    if scope is None:
        return []

    branches = []
    for line in ctx.git.list_branches(scope):
        name = parse_branch_line(line)
        if name is not None:
            branches.append(name)

    if options.include_patterns:
        branches = [b for b in branches if any(p.search(b) for p in options.include_patterns)]

    # Exclusion runs after inclusion, so a branch matching both is dropped
    if options.exclude_patterns:
        branches = [b for b in branches if not any(p.search(b) for p in options.exclude_patterns)]

    branches = [b for b in branches if b != options.base]

    if options.specific_remotes is not None:
        remotes = sorted(options.specific_remotes)
        branches = [b for b in branches if branch_remote(b, remotes)]

    ctx.say(f"Checking {len(branches)} branches for unmerged changes...")
    return branches


def is_old(ctx: RunContext, branch: str) -> bool:
    """Tell whether a branch has no commits that are missing from the base."""
    commits = ctx.git.commits_in_range(ctx.options.base, branch)
    logger.debug("%s has %d commit(s) not in %s", branch, len(commits), ctx.options.base)
    return not commits


def find_old_branches(ctx: RunContext) -> list[str]:
    return [branch for branch in find_candidate_branches(ctx) if is_old(ctx, branch)]


def fetch_remotes(ctx: RunContext) -> None:
    """Fetch every remote, pruning stale remote-tracking branches."""
    remotes = ctx.remotes
    ctx.say(f"Fetching from {len(remotes)} remote{'s' if len(remotes) != 1 else ''}...")
    for remote in remotes:
        logger.info("Fetching %s", remote)
        ctx.git.fetch(remote)


def delete_branch(ctx: RunContext, branch: str) -> None:
    """Delete a branch, on its remote if it is a remote-tracking branch."""
    remote = branch_remote(branch, ctx.remotes)
    if remote:
        remote_branch = branch[len(remote) + 1 :]
        ctx.say(escape(f"git push {remote} :{remote_branch}"))
        ctx.git.delete_remote(remote, remote_branch)
    else:
        ctx.say(escape(f"git branch -D {branch}"))
        ctx.git.delete_local(branch)


def prune(ctx: RunContext) -> tuple[list[str], list[str]]:
    """Run the whole pipeline: fetch, find old branches, act on them.

    Returns:
        A tuple of (old_branches, deleted_branches).
    """
    if ctx.options.fetch:
        fetch_remotes(ctx)

    old = find_old_branches(ctx)
    deleted = []
    for branch in old:
        ctx.say(
            f"Branch '[cyan]{escape(branch)}[/cyan]' contains no changes that are not in {escape(ctx.options.base)}."
        )
        if ctx.options.action == Action.LIST:
            continue
        if ctx.options.action == Action.DELETE or ctx.confirm(branch):
            delete_branch(ctx, branch)
            deleted.append(branch)
        else:
            logger.info("Keeping %s", branch)

    ctx.say("Finished.")
    return old, deleted
