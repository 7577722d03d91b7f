"""Hook and filter policy for flow operations.

Hooks are named `{pre,post}-flow-<type>-<action>`. A pre-hook exiting
non-zero vetoes the operation before anything is changed; a post-hook
receives the operation's outcome in EXIT_CODE and cannot change it.

Filters are named `filter-flow-<type>-<action>-<target>` and transform a
value through their stdout. Empty output keeps the original value.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import click

from branchflow.errors import FilterFailureError, HookRejectionError
from branchflow.gateway.git.abc import Git
from branchflow.gateway.hooks.abc import HookRunner
from branchflow.gateway.hooks.types import HookResult
from branchflow.output import user_output

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ACTIONS_WITH_BASE_ARG = frozenset({"start", "update"})


@dataclass(frozen=True)
class HookContext:
    """Values exposed to hook scripts.

    Attributes:
        branch_type: Topic type ("feature")
        branch_name: Short branch name ("login")
        full_branch: Full branch name ("feature/login")
        base_branch: Base or parent branch
        origin: Remote name
        version: Version being released, when tagging
    """

    branch_type: str
    branch_name: str
    full_branch: str
    base_branch: str
    origin: str
    version: str | None = None


def resolve_hooks_dir(git: Git, cwd: Path, repo_root: Path) -> Path:
    """Find the hooks directory.

    Order: gitflow.path.hooks, then core.hooksPath, then the hooks directory
    of the common git dir. Relative paths resolve against the repository root.
    """
    for key in ("gitflow.path.hooks", "core.hooksPath"):
        configured = git.config.config_get(cwd, key)
        if configured:
            path = Path(configured).expanduser()
            return path if path.is_absolute() else repo_root / path
    return git.repo.get_git_common_dir(cwd) / "hooks"


def build_hook_args(action: str, context: HookContext) -> list[str]:
    args = [context.branch_name, context.origin, context.full_branch]
    if action in _ACTIONS_WITH_BASE_ARG:
        args.append(context.base_branch)
    return args


def build_hook_env(context: HookContext, *, exit_code: int | None = None) -> dict[str, str]:
    env = {
        "BRANCH": context.full_branch,
        "BRANCH_NAME": context.branch_name,
        "BRANCH_TYPE": context.branch_type,
        "BASE_BRANCH": context.base_branch,
        "ORIGIN": context.origin,
    }
    if context.version:
        env["VERSION"] = context.version
    if exit_code is not None:
        env["EXIT_CODE"] = str(exit_code)
    return env


class FlowHooks:
    """Runs the hooks and filters of one repository."""

    def __init__(self, runner: HookRunner, hooks_dir: Path, cwd: Path) -> None:
        self._runner = runner
        self._hooks_dir = hooks_dir
        self._cwd = cwd

    def _run(self, name: str, args: list[str], env: dict[str, str]) -> HookResult | None:
        script = self._runner.find_script(self._hooks_dir, name)
        if script is None:
            return None
        logger.debug("Running %s", name)
        return self._runner.run_script(script, args=args, env=env, cwd=self._cwd)

    def run_pre_hook(self, action: str, context: HookContext) -> None:
        """Run the pre-hook; a non-zero exit raises HookRejectionError."""
        name = f"pre-flow-{context.branch_type}-{action}"
        result = self._run(name, build_hook_args(action, context), build_hook_env(context))
        if result is not None and not result.success:
            raise HookRejectionError(name, result.exit_code, result.output)

    def run_post_hook(self, action: str, context: HookContext, *, exit_code: int) -> None:
        """Run the post-hook. Its failure is reported, never raised."""
        name = f"post-flow-{context.branch_type}-{action}"
        result = self._run(
            name, build_hook_args(action, context), build_hook_env(context, exit_code=exit_code)
        )
        if result is None:
            return
        if result.output:
            user_output(result.output)
        if not result.success:
            user_output(
                click.style("Warning: ", fg="yellow")
                + f"post-hook '{name}' failed with exit code {result.exit_code}"
            )

    def with_hooks(self, action: str, context: HookContext, operation: Callable[[], T]) -> T:
        """Run operation between the pre-hook and the post-hook.

        The post-hook runs with EXIT_CODE=1 when the operation raises; the
        exception still propagates.
        """
        self.run_pre_hook(action, context)
        try:
            result = operation()
        except Exception:
            self.run_post_hook(action, context, exit_code=1)
            raise
        self.run_post_hook(action, context, exit_code=0)
        return result

    # ============================================================================
    # Filters
    # ============================================================================

    def _run_filter(self, name: str, args: list[str], context: HookContext, value: str) -> str:
        env = {
            "BRANCH_TYPE": context.branch_type,
            "BRANCH_NAME": context.branch_name,
            "BASE_BRANCH": context.base_branch,
        }
        if context.version:
            env["VERSION"] = context.version
        result = self._run(name, args, env)
        if result is None:
            return value
        if not result.success:
            detail = f"exit code {result.exit_code}"
            if result.stderr.strip():
                detail += f": {result.stderr.strip()}"
            raise FilterFailureError(name, detail)
        filtered = result.stdout.strip()
        return filtered or value

    def run_version_filter(self, context: HookContext, version: str) -> str:
        """Filter the name of a branch being started (`filter-flow-<type>-start-version`)."""
        name = f"filter-flow-{context.branch_type}-start-version"
        return self._run_filter(name, [version], context, version)

    def run_tag_message_filter(self, context: HookContext, version: str, message: str) -> str:
        """Filter the tag message at finish (`filter-flow-<type>-finish-tag-message`)."""
        name = f"filter-flow-{context.branch_type}-finish-tag-message"
        return self._run_filter(name, [version, message], context, message)
