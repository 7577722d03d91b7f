"""Git config operations subgateway."""

from branchflow.gateway.git.config_ops.abc import GitConfigOps
from branchflow.gateway.git.config_ops.fake import FakeGitConfigOps
from branchflow.gateway.git.config_ops.real import RealGitConfigOps

__all__ = [
    "GitConfigOps",
    "RealGitConfigOps",
    "FakeGitConfigOps",
]
