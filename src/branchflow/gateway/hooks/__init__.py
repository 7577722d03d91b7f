"""Hook and filter script execution gateway."""

from branchflow.gateway.hooks.abc import HookRunner
from branchflow.gateway.hooks.fake import FakeHookRunner
from branchflow.gateway.hooks.real import RealHookRunner
from branchflow.gateway.hooks.types import HookResult, HookRun

__all__ = [
    "HookRunner",
    "RealHookRunner",
    "FakeHookRunner",
    "HookResult",
    "HookRun",
]
