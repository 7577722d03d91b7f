"""Git repository operations subgateway."""

from branchflow.gateway.git.repo_ops.abc import GitRepoOps
from branchflow.gateway.git.repo_ops.fake import FakeGitRepoOps
from branchflow.gateway.git.repo_ops.real import RealGitRepoOps

__all__ = [
    "GitRepoOps",
    "RealGitRepoOps",
    "FakeGitRepoOps",
]
