"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess, composed from one real sub-gateway per concern.
"""

from branchflow.gateway.git.abc import Git
from branchflow.gateway.git.branch_ops.abc import GitBranchOps
from branchflow.gateway.git.branch_ops.real import RealGitBranchOps
from branchflow.gateway.git.config_ops.abc import GitConfigOps
from branchflow.gateway.git.config_ops.real import RealGitConfigOps
from branchflow.gateway.git.merge_ops.abc import GitMergeOps
from branchflow.gateway.git.merge_ops.real import RealGitMergeOps
from branchflow.gateway.git.rebase_ops.abc import GitRebaseOps
from branchflow.gateway.git.rebase_ops.real import RealGitRebaseOps
from branchflow.gateway.git.remote_ops.abc import GitRemoteOps
from branchflow.gateway.git.remote_ops.real import RealGitRemoteOps
from branchflow.gateway.git.repo_ops.abc import GitRepoOps
from branchflow.gateway.git.repo_ops.real import RealGitRepoOps
from branchflow.gateway.git.tag_ops.abc import GitTagOps
from branchflow.gateway.git.tag_ops.real import RealGitTagOps


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def __init__(self) -> None:
        self._branch = RealGitBranchOps()
        self._merge = RealGitMergeOps()
        self._rebase = RealGitRebaseOps()
        self._tag = RealGitTagOps()
        self._remote = RealGitRemoteOps()
        self._config = RealGitConfigOps()
        self._repo = RealGitRepoOps()

    @property
    def branch(self) -> GitBranchOps:
        """Access branch operations subgateway."""
        return self._branch

    @property
    def merge(self) -> GitMergeOps:
        """Access merge and commit operations subgateway."""
        return self._merge

    @property
    def rebase(self) -> GitRebaseOps:
        """Access rebase operations subgateway."""
        return self._rebase

    @property
    def tag(self) -> GitTagOps:
        """Access tag operations subgateway."""
        return self._tag

    @property
    def remote(self) -> GitRemoteOps:
        """Access remote operations subgateway."""
        return self._remote

    @property
    def config(self) -> GitConfigOps:
        """Access git config operations subgateway."""
        return self._config

    @property
    def repo(self) -> GitRepoOps:
        """Access repository-level operations subgateway."""
        return self._repo
