"""Branch name validation and resolution against the repository."""

import re
from pathlib import Path

from branchflow.core.topology import BranchConfig, full_name
from branchflow.errors import BranchNotFoundError, EmptyBranchNameError, InvalidBranchNameError
from branchflow.gateway.git.abc import Git

# Subset of git-check-ref-format rules that matter for names typed by hand
_INVALID_SEQUENCES = ("..", "@{", "//")
_INVALID_CHARS = re.compile(r"[\x00-\x20~^:?*\[\\\x7f]")


def validate_branch_name(name: str) -> str:
    """Return the stripped name, or raise if git would refuse it as a branch name."""
    stripped = name.strip()
    if not stripped:
        raise EmptyBranchNameError()
    if _INVALID_CHARS.search(stripped):
        raise InvalidBranchNameError(stripped, "contains a character git does not allow")
    for sequence in _INVALID_SEQUENCES:
        if sequence in stripped:
            raise InvalidBranchNameError(stripped, f"contains '{sequence}'")
    if stripped.startswith(("-", "/", ".")) or stripped.endswith(("/", ".", ".lock")):
        raise InvalidBranchNameError(stripped, "has an invalid start or end")
    if stripped == "@":
        raise InvalidBranchNameError(stripped)
    return stripped


def resolve_topic_branch(git: Git, cwd: Path, topic: BranchConfig, name: str) -> str:
    """Find the local branch meant by `name`: as given first, then with the prefix."""
    if git.branch.branch_exists(cwd, name):
        return name
    prefixed = full_name(topic, name)
    if prefixed != name and git.branch.branch_exists(cwd, prefixed):
        return prefixed
    raise BranchNotFoundError(name)


def require_prefix(topic: BranchConfig, branch: str, *, force: bool) -> None:
    """Reject a branch that lacks the topic type's prefix unless forced."""
    if force or not topic.prefix or branch.startswith(topic.prefix):
        return
    raise InvalidBranchNameError(
        branch,
        f"not a {topic.name} branch: missing prefix '{topic.prefix}'; "
        "use --force to finish it anyway",
    )
