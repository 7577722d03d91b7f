"""Git merge operations subgateway."""

from branchflow.gateway.git.merge_ops.abc import GitMergeOps
from branchflow.gateway.git.merge_ops.fake import FakeGitMergeOps
from branchflow.gateway.git.merge_ops.real import RealGitMergeOps

__all__ = [
    "GitMergeOps",
    "RealGitMergeOps",
    "FakeGitMergeOps",
]
