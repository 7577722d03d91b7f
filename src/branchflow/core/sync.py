"""Compare a local branch with its remote tracking branch."""

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from branchflow.errors import BranchBehindRemoteError, GitOperationError
from branchflow.gateway.git.abc import Git
from branchflow.output import user_output

logger = logging.getLogger(__name__)


class SyncStatus(StrEnum):
    EQUAL = "equal"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"
    NO_TRACKING = "no_tracking"


@dataclass(frozen=True)
class SyncResult:
    """Sync status plus the commit count that goes with it.

    For DIVERGED the count is ahead + behind.
    """

    status: SyncStatus
    commit_count: int
    tracking_branch: str | None = None


def classify_sync(ahead: int, behind: int) -> tuple[SyncStatus, int]:
    if ahead == 0 and behind == 0:
        return SyncStatus.EQUAL, 0
    if behind == 0:
        return SyncStatus.AHEAD, ahead
    if ahead == 0:
        return SyncStatus.BEHIND, behind
    return SyncStatus.DIVERGED, ahead + behind


def compare_with_remote(git: Git, cwd: Path, branch: str) -> SyncResult:
    """Compare `branch` with its upstream.

    A branch without an upstream is NO_TRACKING, not an error.
    """
    tracking = git.branch.get_upstream_branch(cwd, branch)
    if tracking is None:
        return SyncResult(status=SyncStatus.NO_TRACKING, commit_count=0)

    try:
        ahead, behind = git.branch.count_left_right(cwd, branch, tracking)
    except RuntimeError as e:
        raise GitOperationError(f"compare '{branch}' with '{tracking}'", str(e)) from e

    status, count = classify_sync(ahead, behind)
    logger.debug("Sync %s vs %s: %s (%d)", branch, tracking, status, count)
    return SyncResult(status=status, commit_count=count, tracking_branch=tracking)


def check_finish_sync(git: Git, cwd: Path, branch: str, *, branch_type: str) -> SyncResult:
    """Refuse to finish a branch that is behind or diverged from its remote.

    A branch ahead of its remote is allowed with a note.
    """
    result = compare_with_remote(git, cwd, branch)

    if result.status in (SyncStatus.BEHIND, SyncStatus.DIVERGED):
        assert result.tracking_branch is not None
        raise BranchBehindRemoteError(
            branch_name=branch,
            remote_branch=result.tracking_branch,
            commit_count=result.commit_count,
            branch_type=branch_type,
            diverged=result.status == SyncStatus.DIVERGED,
        )
    if result.status == SyncStatus.AHEAD:
        user_output(f"Note: Local branch is {result.commit_count} commit(s) ahead of remote")
    return result
