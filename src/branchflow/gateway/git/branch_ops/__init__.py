"""Git branch operations subgateway."""

from branchflow.gateway.git.branch_ops.abc import GitBranchOps
from branchflow.gateway.git.branch_ops.fake import FakeGitBranchOps
from branchflow.gateway.git.branch_ops.real import RealGitBranchOps

__all__ = [
    "GitBranchOps",
    "RealGitBranchOps",
    "FakeGitBranchOps",
]
