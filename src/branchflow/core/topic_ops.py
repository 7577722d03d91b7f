"""Fast-path topic branch operations.

Each operation runs inside the pre-hook / mutation / post-hook envelope of
FlowHooks.with_hooks. None of them can pause: they either complete or raise.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import click

from branchflow.core.branch_names import resolve_topic_branch, validate_branch_name
from branchflow.core.config_store import get_stored_base, set_stored_base, unset_stored_base
from branchflow.core.context import FlowContext
from branchflow.core.hooks import HookContext
from branchflow.core.operation_state import ensure_no_operation_in_progress
from branchflow.core.topology import BranchConfig, FlowConfig, full_name, short_name
from branchflow.errors import (
    BranchExistsError,
    BranchNotFoundError,
    InvalidBranchNameError,
    RemoteBranchExistsError,
    RemoteBranchNotFoundError,
    wrap_git_errors,
)
from branchflow.gateway.git.abc import Git
from branchflow.output import user_output

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopicBranch:
    """A concrete branch of a topic type, as listed by `<type> list`."""

    name: str
    short_name: str
    is_current: bool
    base: str | None


class _TopicOperation:
    """Shared setup: initialized config, topic type, repository root."""

    def __init__(self, ctx: FlowContext, branch_type: str) -> None:
        self.ctx = ctx
        self.git: Git = ctx.git
        self.cwd: Path = ctx.require_repo().root
        self.config: FlowConfig = ctx.load_initialized_config()
        self.topic: BranchConfig = self.config.require_topic_type(branch_type)

    def hook_context(self, branch: str, base: str | None) -> HookContext:
        short = short_name(self.topic, branch)
        return HookContext(
            branch_type=self.topic.name,
            branch_name=short,
            full_branch=branch,
            base_branch=base or self.topic.parent or "",
            origin=self.config.remote,
            version=short if self.topic.tag else None,
        )

    def current_or_named(self, name: str | None) -> str:
        if name is not None:
            return resolve_topic_branch(self.git, self.cwd, self.topic, name)
        current = self.git.branch.get_current_branch(self.cwd)
        if current is None or not current.startswith(self.topic.prefix):
            raise BranchNotFoundError(name or f"current {self.topic.name} branch")
        return current


def _warn(message: str) -> None:
    user_output(click.style("Warning: ", fg="yellow") + message)


# ============================================================================
# start
# ============================================================================


def start_branch(
    ctx: FlowContext,
    branch_type: str,
    name: str,
    base: str | None = None,
    *,
    fetch: bool | None = None,
) -> str:
    """Create and check out a new topic branch; returns its full name.

    The start point is `base` when given, else the topic type's start point,
    else its parent.
    """
    op = _TopicOperation(ctx, branch_type)
    name = validate_branch_name(name)
    ensure_no_operation_in_progress(ctx.state_store())

    hooks = ctx.hooks()
    start_point = base or op.topic.start_point or op.topic.parent or ""
    filter_context = HookContext(
        branch_type=op.topic.name,
        branch_name=name,
        full_branch=full_name(op.topic, name),
        base_branch=start_point,
        origin=op.config.remote,
        version=name,
    )
    filtered = validate_branch_name(hooks.run_version_filter(filter_context, name))
    if filtered != name:
        user_output(f"Version filter changed '{name}' to '{filtered}'")
        name = filtered

    branch = full_name(op.topic, name)
    should_fetch = fetch
    if should_fetch is None:
        should_fetch = bool(op.config.command_flag(op.topic.name, "start", "fetch"))

    def create() -> str:
        if should_fetch:
            user_output(f"Fetching from {op.config.remote}...")
            try:
                op.git.remote.fetch_remote(op.cwd, op.config.remote)
            except RuntimeError as e:
                _warn(str(e))

        if op.git.branch.branch_exists(op.cwd, branch):
            raise BranchExistsError(branch)
        if not start_point or not op.git.branch.branch_exists(op.cwd, start_point):
            raise BranchNotFoundError(start_point)

        with wrap_git_errors(f"create branch '{branch}'"):
            op.git.branch.create_branch(op.cwd, branch, start_point)
            op.git.branch.checkout_branch(op.cwd, branch)
        try:
            set_stored_base(op.git, op.cwd, branch, start_point)
        except RuntimeError as e:
            _warn(f"failed to store base branch: {e}")

        user_output(f"Created branch '{branch}' from '{start_point}'")
        return branch

    return hooks.with_hooks("start", op.hook_context(branch, start_point), create)


# ============================================================================
# publish / track
# ============================================================================


def publish_branch(
    ctx: FlowContext,
    branch_type: str,
    name: str | None = None,
    *,
    push_options: tuple[str, ...] = (),
    no_push_option: bool = False,
) -> str:
    """Push a topic branch to the remote and set its upstream."""
    op = _TopicOperation(ctx, branch_type)
    branch = op.current_or_named(name)
    remote = op.config.remote

    options: list[str] = []
    if not no_push_option:
        options.extend(op.config.command_option_all(op.topic.name, "publish", "push-option"))
        options.extend(push_options)

    def publish() -> str:
        try:
            op.git.remote.fetch_remote(op.cwd, remote)
        except RuntimeError as e:
            _warn(f"could not fetch from '{remote}': {e}")
        if op.git.remote.remote_branch_exists(op.cwd, remote, branch):
            raise RemoteBranchExistsError(remote, branch)

        with wrap_git_errors(f"push '{branch}' to '{remote}'"):
            op.git.remote.push_branch(
                op.cwd, remote, branch, set_upstream=True, push_options=options
            )
        user_output(f"Published branch '{branch}' to '{remote}/{branch}'")
        return branch

    base = get_stored_base(op.git, op.cwd, branch)
    return ctx.hooks().with_hooks("publish", op.hook_context(branch, base), publish)


def track_branch(ctx: FlowContext, branch_type: str, name: str) -> str:
    """Create a local branch tracking the remote topic branch."""
    op = _TopicOperation(ctx, branch_type)
    branch = full_name(op.topic, validate_branch_name(name))
    remote = op.config.remote

    def track() -> str:
        if op.git.branch.branch_exists(op.cwd, branch):
            raise BranchExistsError(branch)
        with wrap_git_errors(f"fetch from '{remote}'"):
            op.git.remote.fetch_remote(op.cwd, remote)
        if not op.git.remote.remote_branch_exists(op.cwd, remote, branch):
            raise RemoteBranchNotFoundError(remote, branch)

        with wrap_git_errors(f"track '{remote}/{branch}'"):
            op.git.branch.create_tracking_branch(op.cwd, branch, f"{remote}/{branch}")
        user_output(f"Created local branch '{branch}' tracking '{remote}/{branch}'")
        return branch

    return ctx.hooks().with_hooks("track", op.hook_context(branch, None), track)


# ============================================================================
# delete / rename
# ============================================================================


def delete_branch(
    ctx: FlowContext,
    branch_type: str,
    name: str | None = None,
    *,
    force: bool | None = None,
    remote: bool | None = None,
) -> str:
    """Delete a topic branch locally and optionally on the remote."""
    op = _TopicOperation(ctx, branch_type)
    branch = op.current_or_named(name)
    base = get_stored_base(op.git, op.cwd, branch)

    if force is None:
        force = bool(op.config.command_flag(op.topic.name, "delete", "force"))
    if remote is None:
        remote = bool(op.config.command_flag(op.topic.name, "delete", "remote"))

    def delete() -> str:
        if op.git.branch.get_current_branch(op.cwd) == branch:
            target = op.topic.parent or base
            if target is None:
                raise BranchNotFoundError(f"parent of '{branch}'")
            with wrap_git_errors(f"checkout '{target}'"):
                op.git.branch.checkout_branch(op.cwd, target)

        with wrap_git_errors(f"delete branch '{branch}'"):
            op.git.branch.delete_branch(op.cwd, branch, force=force)

        if remote and op.git.remote.remote_branch_exists(op.cwd, op.config.remote, branch):
            with wrap_git_errors(f"delete remote branch '{op.config.remote}/{branch}'"):
                op.git.remote.delete_remote_branch(op.cwd, op.config.remote, branch)

        try:
            unset_stored_base(op.git, op.cwd, branch)
        except RuntimeError as e:
            _warn(f"failed to clean up base config: {e}")

        user_output(f"Deleted branch '{branch}'")
        return branch

    return ctx.hooks().with_hooks("delete", op.hook_context(branch, base), delete)


def rename_branch(ctx: FlowContext, branch_type: str, old_name: str, new_name: str) -> str:
    """Rename a topic branch, carrying its stored base along."""
    op = _TopicOperation(ctx, branch_type)
    old_branch = resolve_topic_branch(op.git, op.cwd, op.topic, old_name)
    new_branch = full_name(op.topic, validate_branch_name(new_name))
    base = get_stored_base(op.git, op.cwd, old_branch)

    def rename() -> str:
        if op.git.branch.branch_exists(op.cwd, new_branch):
            raise BranchExistsError(new_branch)
        with wrap_git_errors(f"rename branch '{old_branch}'"):
            op.git.branch.rename_branch(op.cwd, old_branch, new_branch)
        if base is not None:
            try:
                set_stored_base(op.git, op.cwd, new_branch, base)
                unset_stored_base(op.git, op.cwd, old_branch)
            except RuntimeError as e:
                _warn(f"failed to move base config: {e}")
        user_output(f"Renamed branch '{old_branch}' to '{new_branch}'")
        return new_branch

    return ctx.hooks().with_hooks("rename", op.hook_context(old_branch, base), rename)


# ============================================================================
# list / checkout
# ============================================================================


def list_branches(ctx: FlowContext, branch_type: str) -> list[TopicBranch]:
    op = _TopicOperation(ctx, branch_type)
    current = op.git.branch.get_current_branch(op.cwd)
    return [
        TopicBranch(
            name=branch,
            short_name=short_name(op.topic, branch),
            is_current=branch == current,
            base=get_stored_base(op.git, op.cwd, branch),
        )
        for branch in sorted(op.git.branch.list_local_branches(op.cwd))
        if op.topic.prefix and branch.startswith(op.topic.prefix)
    ]


def checkout_branch(ctx: FlowContext, branch_type: str, name: str) -> str:
    """Check out the topic branch named `name`, or the only one starting with it."""
    op = _TopicOperation(ctx, branch_type)
    name = validate_branch_name(name)
    candidates = [
        branch.name
        for branch in list_branches(ctx, branch_type)
        if branch.name == full_name(op.topic, name) or branch.short_name.startswith(name)
    ]

    exact = full_name(op.topic, name)
    if exact in candidates:
        target = exact
    elif len(candidates) == 1:
        target = candidates[0]
    elif not candidates:
        raise BranchNotFoundError(exact)
    else:
        raise InvalidBranchNameError(
            name, f"matches several {op.topic.name} branches: {', '.join(candidates)}"
        )

    def checkout() -> str:
        with wrap_git_errors(f"checkout '{target}'"):
            op.git.branch.checkout_branch(op.cwd, target)
        user_output(f"Switched to branch '{target}'")
        return target

    base = get_stored_base(op.git, op.cwd, target)
    return ctx.hooks().with_hooks("checkout", op.hook_context(target, base), checkout)
