"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
orchestration code testable without a real repository.

Architecture:
- Git: Abstract composite exposing one sub-gateway per concern
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation with shared state across sub-gateways
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from branchflow.gateway.git.branch_ops.abc import GitBranchOps
    from branchflow.gateway.git.config_ops.abc import GitConfigOps
    from branchflow.gateway.git.merge_ops.abc import GitMergeOps
    from branchflow.gateway.git.rebase_ops.abc import GitRebaseOps
    from branchflow.gateway.git.remote_ops.abc import GitRemoteOps
    from branchflow.gateway.git.repo_ops.abc import GitRepoOps
    from branchflow.gateway.git.tag_ops.abc import GitTagOps


@dataclass(frozen=True)
class GitCommandResult:
    """Outcome of a git command whose failure is an expected result.

    Merge-family commands (merge, rebase, commit) fail on conflicts, which
    callers classify instead of treating as errors.

    Attributes:
        returncode: Process exit status
        output: Combined stdout and stderr
    """

    returncode: int
    output: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @property
    @abstractmethod
    def branch(self) -> GitBranchOps:
        """Access branch operations subgateway."""
        ...

    @property
    @abstractmethod
    def merge(self) -> GitMergeOps:
        """Access merge and commit operations subgateway."""
        ...

    @property
    @abstractmethod
    def rebase(self) -> GitRebaseOps:
        """Access rebase operations subgateway."""
        ...

    @property
    @abstractmethod
    def tag(self) -> GitTagOps:
        """Access tag operations subgateway."""
        ...

    @property
    @abstractmethod
    def remote(self) -> GitRemoteOps:
        """Access remote operations subgateway."""
        ...

    @property
    @abstractmethod
    def config(self) -> GitConfigOps:
        """Access git config operations subgateway."""
        ...

    @property
    @abstractmethod
    def repo(self) -> GitRepoOps:
        """Access repository-level operations subgateway."""
        ...
