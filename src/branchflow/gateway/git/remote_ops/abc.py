"""Abstract base class for Git remote operations.

Network-touching operations (fetch, push) raise RuntimeError on failure;
callers decide whether a failure is fatal or only worth a note.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class GitRemoteOps(ABC):
    """Abstract interface for Git remote operations."""

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def fetch_branch(self, cwd: Path, remote: str, branch: str) -> None:
        """Fetch a specific branch from a remote."""
        ...

    @abstractmethod
    def fetch_remote(self, cwd: Path, remote: str) -> None:
        """Fetch all branches from a remote."""
        ...

    @abstractmethod
    def push_branch(
        self,
        cwd: Path,
        remote: str,
        branch: str,
        *,
        set_upstream: bool,
        push_options: list[str],
    ) -> None:
        """Push a branch to a remote.

        Args:
            cwd: Working directory to run command in
            remote: Remote name (e.g., 'origin')
            branch: Branch to push
            set_upstream: Pass -u to record the remote branch as upstream
            push_options: Values passed through as `-o <option>`
        """
        ...

    @abstractmethod
    def delete_remote_branch(self, cwd: Path, remote: str, branch: str) -> None:
        """Delete a branch on the remote with `git push <remote> :<branch>`."""
        ...

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        """Check whether refs/remotes/<remote>/<branch> exists locally."""
        ...
