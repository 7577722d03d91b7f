"""Abstract base class for Git rebase operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from branchflow.gateway.git.abc import GitCommandResult


class GitRebaseOps(ABC):
    """Abstract interface for Git rebase operations.

    All implementations (real and fake) must implement this interface.
    """

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def rebase(self, cwd: Path, upstream: str, *, rebase_merges: bool) -> GitCommandResult:
        """Rebase the current branch onto upstream.

        Args:
            cwd: Working directory to run command in
            upstream: Ref to replay the current branch's commits onto
            rebase_merges: Pass --rebase-merges to keep merge commits

        Returns:
            Result whose failure usually means a conflict stopped the replay
        """
        ...

    @abstractmethod
    def rebase_continue(self, cwd: Path) -> GitCommandResult:
        """Run `git rebase --continue` with the editor disabled."""
        ...

    @abstractmethod
    def rebase_abort(self, cwd: Path) -> None:
        """Abort an in-progress rebase operation."""
        ...

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def is_rebase_in_progress(self, cwd: Path) -> bool:
        """Check for the rebase-merge or rebase-apply state directories."""
        ...
