"""Abstract base class for Git merge and commit operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from branchflow.gateway.git.abc import GitCommandResult


class GitMergeOps(ABC):
    """Abstract interface for merge, squash and commit operations.

    Merge and commit report conflicts through their GitCommandResult rather
    than raising, since a conflict is an expected outcome the caller pauses on.
    """

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def merge(
        self,
        cwd: Path,
        source: str,
        *,
        no_ff: bool,
        squash: bool,
        no_verify: bool,
        message: str | None,
    ) -> GitCommandResult:
        """Merge source into the currently checked-out branch.

        Args:
            cwd: Working directory to run command in
            source: Branch to merge
            no_ff: Pass --no-ff to always create a merge commit
            squash: Pass --squash; the result is staged but not committed
            no_verify: Pass --no-verify to skip pre-merge hooks
            message: Merge commit message (ignored with squash)
        """
        ...

    @abstractmethod
    def merge_abort(self, cwd: Path) -> None:
        """Abort an in-progress merge with `git merge --abort`."""
        ...

    @abstractmethod
    def commit(self, cwd: Path, message: str, *, no_verify: bool) -> GitCommandResult:
        """Commit the index with the given message."""
        ...

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def get_unmerged_files(self, cwd: Path) -> list[str]:
        """List paths with unmerged index entries (`git ls-files --unmerged`)."""
        ...

    @abstractmethod
    def is_merge_in_progress(self, cwd: Path) -> bool:
        """Check whether MERGE_HEAD exists."""
        ...

    @abstractmethod
    def has_staged_changes(self, cwd: Path) -> bool:
        """Check whether the index differs from HEAD."""
        ...
