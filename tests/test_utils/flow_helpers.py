"""Builders for fake-backed flow contexts.

Tests describe the repository (branches, conflicts, remote refs) through
FakeGit keyword arguments and get back a FlowContext whose configuration is
already initialized with a preset.
"""

from pathlib import Path

from branchflow.core.config_store import preset_config, save_flow_config
from branchflow.core.context import FlowContext
from branchflow.core.topology import FlowConfig
from branchflow.gateway.git.fake import FakeGit
from branchflow.gateway.hooks.fake import FakeHookRunner
from branchflow.gateway.hooks.types import HookResult


def config_entries(config: FlowConfig) -> dict[str, str | list[str]]:
    """Render a FlowConfig as the git config entries FakeGit accepts."""
    scratch = FakeGit(repo_root=Path("/scratch"))
    save_flow_config(scratch, Path("/scratch"), config)
    return dict(scratch.config_values)


def classic_entries(**extra: str) -> dict[str, str | list[str]]:
    """Classic preset entries plus extra settings.

    Example:
        >>> classic_entries(**{"gitflow.feature.finish.squash": "true"})
    """
    entries = config_entries(preset_config("classic"))
    entries.update(extra)
    return entries


def build_flow_context(
    tmp_path: Path,
    *,
    current_branch: str | None = "develop",
    local_branches: list[str] | None = None,
    config: dict[str, str | list[str]] | None = None,
    scripts: dict[str, HookResult] | None = None,
    **git_kwargs,
) -> tuple[FlowContext, FakeGit, FakeHookRunner]:
    """FlowContext over a FakeGit rooted at tmp_path.

    The operation state file is written to tmp_path/.git, so tests can inspect
    it between a pause and a --continue.
    """
    git = FakeGit(
        repo_root=tmp_path,
        current_branches={tmp_path: current_branch},
        local_branches=local_branches if local_branches is not None else ["main", "develop"],
        config=config if config is not None else classic_entries(),
        **git_kwargs,
    )
    hook_runner = FakeHookRunner(scripts=scripts)
    ctx = FlowContext.for_test(git=git, hook_runner=hook_runner, cwd=tmp_path)
    return ctx, git, hook_runner
