"""Git rebase operations subgateway."""

from branchflow.gateway.git.rebase_ops.abc import GitRebaseOps
from branchflow.gateway.git.rebase_ops.fake import FakeGitRebaseOps
from branchflow.gateway.git.rebase_ops.real import RealGitRebaseOps

__all__ = [
    "GitRebaseOps",
    "RealGitRebaseOps",
    "FakeGitRebaseOps",
]
