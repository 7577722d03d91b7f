"""Git remote operations subgateway."""

from branchflow.gateway.git.remote_ops.abc import GitRemoteOps
from branchflow.gateway.git.remote_ops.fake import FakeGitRemoteOps
from branchflow.gateway.git.remote_ops.real import RealGitRemoteOps

__all__ = [
    "GitRemoteOps",
    "RealGitRemoteOps",
    "FakeGitRemoteOps",
]
