"""Abstract base class for Git tag operations."""

from abc import ABC, abstractmethod
from pathlib import Path


class GitTagOps(ABC):
    """Abstract interface for Git tag operations."""

    @abstractmethod
    def create_tag(
        self,
        cwd: Path,
        tag_name: str,
        *,
        ref: str,
        message: str,
        message_file: Path | None,
        sign: bool,
        signing_key: str | None,
    ) -> None:
        """Create an annotated tag.

        Args:
            cwd: Working directory to run command in
            tag_name: Name of the tag
            ref: Commit or branch the tag points at
            message: Tag message, used when message_file is None
            message_file: File to read the tag message from (-F)
            sign: Create a GPG-signed tag (-s)
            signing_key: Key to sign with (-u); implies signing
        """
        ...

    @abstractmethod
    def tag_exists(self, cwd: Path, tag_name: str) -> bool:
        """Check whether refs/tags/<tag_name> exists."""
        ...
