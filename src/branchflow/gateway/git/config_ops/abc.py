"""Abstract interface for git configuration operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from branchflow.gateway.git.config_ops.types import ConfigScope


class GitConfigOps(ABC):
    """Abstract interface for Git configuration operations.

    This interface contains both mutation and query operations for git config.
    Writes go to an explicit scope; reads see git's merged view of all scopes.
    """

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def config_set(self, cwd: Path, key: str, value: str, *, scope: ConfigScope) -> None:
        """Set a git configuration value.

        Args:
            cwd: Working directory
            key: Configuration key (e.g., "gitflow.branch.develop.parent")
            value: Configuration value
            scope: Configuration file to write to

        Raises:
            RuntimeError: If git command fails
        """
        ...

    @abstractmethod
    def config_unset(self, cwd: Path, key: str, *, scope: ConfigScope) -> None:
        """Remove every value of a key. A missing key is not an error."""
        ...

    @abstractmethod
    def config_remove_section(self, cwd: Path, section: str, *, scope: ConfigScope) -> None:
        """Remove a whole section (e.g., "gitflow.branch.develop").

        A missing section is not an error.
        """
        ...

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def config_get(self, cwd: Path, key: str) -> str | None:
        """Get the last value of a key, or None if unset."""
        ...

    @abstractmethod
    def config_get_all(self, cwd: Path, key: str) -> list[str]:
        """Get every value of a multi-valued key, in file order."""
        ...

    @abstractmethod
    def config_get_regexp(self, cwd: Path, pattern: str) -> list[tuple[str, str]]:
        """Get (key, value) pairs for every key matching pattern.

        Keys come back with section and variable name lower-cased, as git
        reports them.
        """
        ...
