"""Git tag operations subgateway."""

from branchflow.gateway.git.tag_ops.abc import GitTagOps
from branchflow.gateway.git.tag_ops.fake import FakeGitTagOps
from branchflow.gateway.git.tag_ops.real import RealGitTagOps

__all__ = [
    "GitTagOps",
    "RealGitTagOps",
    "FakeGitTagOps",
]
