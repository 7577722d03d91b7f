"""Abstract base class for Git branch operations.

This sub-gateway covers local branch lifecycle (create, checkout, rename,
delete) and the queries the orchestrator needs about local branches and
their upstream tracking refs.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class GitBranchOps(ABC):
    """Abstract interface for Git branch operations.

    This interface contains both mutation and query operations for branches.
    All implementations (real and fake) must implement this interface.
    """

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        """Create a new branch without checking it out.

        Args:
            cwd: Working directory to run command in
            branch_name: Name of the branch to create
            start_point: Commit/branch to base the new branch on
        """
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Checkout a branch in the given directory.

        Args:
            cwd: Working directory to run command in
            branch: Branch name to checkout
        """
        ...

    @abstractmethod
    def delete_branch(self, cwd: Path, branch_name: str, *, force: bool) -> None:
        """Delete a local branch.

        Args:
            cwd: Working directory to run command in
            branch_name: Name of the branch to delete
            force: Use -D (force delete) instead of -d
        """
        ...

    @abstractmethod
    def rename_branch(self, cwd: Path, old_name: str, new_name: str) -> None:
        """Rename a local branch with `git branch -m`."""
        ...

    @abstractmethod
    def create_tracking_branch(self, cwd: Path, branch: str, remote_ref: str) -> None:
        """Create and checkout a local branch tracking a remote branch.

        Args:
            cwd: Working directory to run command in
            branch: Name for the local branch
            remote_ref: Remote reference to track (e.g., 'origin/feature/x')
        """
        ...

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch.

        Returns:
            Branch name, or None if in detached HEAD state or the repository
            has no commits yet
        """
        ...

    @abstractmethod
    def branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check whether refs/heads/<branch> exists."""
        ...

    @abstractmethod
    def list_local_branches(self, cwd: Path) -> list[str]:
        """List all local branch names in the repository."""
        ...

    @abstractmethod
    def get_upstream_branch(self, cwd: Path, branch: str) -> str | None:
        """Get the upstream tracking ref of a branch.

        Returns:
            Short tracking ref name (e.g., 'origin/develop'), or None when the
            branch has no upstream configured
        """
        ...

    @abstractmethod
    def count_left_right(self, cwd: Path, left: str, right: str) -> tuple[int, int]:
        """Count commits unique to each side of left...right.

        Returns:
            (commits only in left, commits only in right)
        """
        ...

    @abstractmethod
    def get_branch_head(self, cwd: Path, branch: str) -> str | None:
        """Get the commit SHA at the head of a branch.

        Returns:
            Commit SHA as a string, or None if the branch doesn't exist
        """
        ...

    @abstractmethod
    def is_ancestor(self, cwd: Path, ancestor: str, descendant: str) -> bool:
        """Check whether every commit of `ancestor` is reachable from `descendant`.

        Runs `git merge-base --is-ancestor`; a branch is its own ancestor.
        """
        ...
