"""Command line interface for lopper."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print

from lopper.git import GitError, GitRepo
from lopper.logging_config import setup_logging
from lopper.options import DEFAULT_BASE_BRANCH, Action, InvalidOption, resolve_options
from lopper.pruner import RunContext, prune

app = typer.Typer(
    help="Find branches with no changes that are not in a base branch, and optionally delete them",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except GitError as err:
        print(f"Error: {err}")
        raise typer.Exit(code=1) from err


@app.command()
def main(
    local: Optional[bool] = typer.Option(None, "--local/--no-local", "-l", help="Act on local branches."),
    remote: Optional[bool] = typer.Option(None, "--remote/--no-remote", "-r", help="Act on remote branches."),
    remotes: Optional[str] = typer.Option(
        None,
        "--remotes",
        help="Comma-separated list of remotes to act on. Implies --remote.",
    ),
    all_branches: bool = typer.Option(
        False, "--all", "-a", help="Act on all local and remote branches. Equivalent to -lr."
    ),
    action: Action = typer.Option(
        Action.LIST, "--action", "-A", case_sensitive=False, help="What to do with old branches."
    ),
    base_branch: str = typer.Option(
        DEFAULT_BASE_BRANCH, "--base-branch", "-b", help="Branch to compare other branches with."
    ),
    exclude: Optional[str] = typer.Option(
        None,
        "--exclude",
        "-e",
        help="Comma-separated regex patterns of branches to leave alone. "
        "Defaults to (^|/)develop$,(^|/)master$,(^|/)release$. Pass an empty value to disable.",
    ),
    include: Optional[str] = typer.Option(
        None,
        "--include",
        "-i",
        help="Comma-separated regex patterns; only matching branches are considered. "
        "A branch matching --exclude too is excluded.",
    ),
    fetch: bool = typer.Option(True, "--fetch/--no-fetch", help="Fetch from every remote first."),
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress details."),
    debug: bool = typer.Option(False, "--debug", help="Show every git command that is run."),
) -> None:
    """Find branches that contain no changes missing from the base branch."""
    setup_logging(verbose=verbose, debug=debug)

    try:
        options = resolve_options(
            local=local,
            remote=remote,
            remotes=remotes,
            all_branches=all_branches,
            action=action,
            base_branch=base_branch,
            exclude=exclude,
            include=include,
            fetch=fetch,
        )
    except InvalidOption as err:
        raise typer.BadParameter(str(err)) from err

    repo = get_repo(path)
    prune(RunContext(git=repo, options=options))


if __name__ == "__main__":
    app()
