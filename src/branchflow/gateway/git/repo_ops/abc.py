"""Abstract base class for repository-level Git operations."""

from abc import ABC, abstractmethod
from pathlib import Path


class GitRepoOps(ABC):
    """Abstract interface for repository discovery and bootstrap operations."""

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def create_initial_commit(self, cwd: Path, message: str) -> None:
        """Create an empty commit so that an empty repository gets a HEAD."""
        ...

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the working tree.

        Returns:
            Repository root, or None when cwd is not inside a git repository
        """
        ...

    @abstractmethod
    def get_git_dir(self, cwd: Path) -> Path:
        """Get the absolute path of this worktree's git directory."""
        ...

    @abstractmethod
    def get_git_common_dir(self, cwd: Path) -> Path:
        """Get the absolute path of the git directory shared by all worktrees."""
        ...

    @abstractmethod
    def has_commits(self, cwd: Path) -> bool:
        """Check whether HEAD resolves to a commit."""
        ...
