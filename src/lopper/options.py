"""Command line option resolution."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

DEFAULT_BASE_BRANCH = "origin/develop"
DEFAULT_EXCLUDE_PATTERNS = (r"(^|/)develop$", r"(^|/)master$", r"(^|/)release$")


class Action(str, Enum):
    """What to do with old branches."""

    LIST = "list"
    ASK = "ask"
    DELETE = "delete"


class InvalidOption(Exception):
    """Malformed or conflicting command line input."""


class InvalidPattern(InvalidOption):
    """A branch pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        """Initialize error.

        Args:
            pattern: The offending pattern
            reason: Why the regular expression engine rejected it
        """
        super().__init__(f"Invalid branch pattern '{pattern}': {reason}")
        self.pattern = pattern


@dataclass(frozen=True)
class Options:
    """Resolved run configuration."""

    include_local: bool = True
    include_remote: bool = False
    specific_remotes: Optional[frozenset[str]] = None
    action: Action = Action.LIST
    base: str = DEFAULT_BASE_BRANCH
    exclude_patterns: tuple[re.Pattern, ...] = tuple(re.compile(p) for p in DEFAULT_EXCLUDE_PATTERNS)
    include_patterns: tuple[re.Pattern, ...] = ()
    fetch: bool = True


def split_list(value: Optional[str]) -> Optional[list[str]]:
    """Split a comma-separated option value.

    ``None`` means the option was not given. An empty string gives an empty list.
    """
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _as_list(value: Optional[Union[str, Sequence[str]]]) -> Optional[list[str]]:
    if isinstance(value, str):
        return split_list(value)
    return None if value is None else list(value)


def compile_patterns(patterns: Sequence[str]) -> tuple[re.Pattern, ...]:
    """Compile branch patterns, keeping their order."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as err:
            raise InvalidPattern(pattern, str(err)) from err
    return tuple(compiled)


def resolve_options(
    local: Optional[bool] = None,
    remote: Optional[bool] = None,
    remotes: Optional[Union[str, Sequence[str]]] = None,
    all_branches: bool = False,
    action: Union[str, Action] = Action.LIST,
    base_branch: str = DEFAULT_BASE_BRANCH,
    exclude: Optional[Union[str, Sequence[str]]] = None,
    include: Optional[Union[str, Sequence[str]]] = None,
    fetch: bool = True,
) -> Options:
    """Turn raw command line values into an Options value.

    Args:
        local: --local/--no-local, None when not given
        remote: --remote/--no-remote, None when not given
        remotes: Remotes to restrict remote branches to
        all_branches: --all, act on local and remote branches
        action: One of list, ask or delete
        base_branch: Branch to compare other branches with
        exclude: Exclusion patterns, None for the defaults
        include: Inclusion patterns, None for no inclusion filter
        fetch: Whether to fetch remotes before looking at branches

    Raises:
        InvalidOption: If the values are malformed or contradict each other
        InvalidPattern: If a pattern does not compile
    """
    if not isinstance(action, Action):
        try:
            action = Action(str(action).lower())
        except ValueError as err:
            choices = ", ".join(a.value for a in Action)
            raise InvalidOption(f"Invalid action '{action}', expected one of: {choices}") from err

    if all_branches:
        local = local is not False
        remote = remote is not False

    remote_list = _as_list(remotes)
    specific_remotes = None
    if remote_list:
        if remote is False:
            raise InvalidOption("--remotes cannot be combined with --no-remote")
        remote = True
        specific_remotes = frozenset(remote_list)

    if local is None and remote is None:
        local = True

    exclude_list = _as_list(exclude)
    if exclude_list is None:
        exclude_list = list(DEFAULT_EXCLUDE_PATTERNS)
    include_list = _as_list(include) or []

    return Options(
        include_local=bool(local),
        include_remote=bool(remote),
        specific_remotes=specific_remotes,
        action=action,
        base=base_branch,
        exclude_patterns=compile_patterns(exclude_list),
        include_patterns=compile_patterns(include_list),
        fetch=fetch,
    )
