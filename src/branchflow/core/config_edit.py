"""Add, edit, rename and delete base branches and topic types."""

import logging
from dataclasses import replace

from branchflow.core.branch_names import validate_branch_name
from branchflow.core.config_store import remove_branch_config, save_branch_config
from branchflow.core.context import FlowContext
from branchflow.core.topology import (
    BranchConfig,
    BranchKind,
    FlowConfig,
    dependents_of,
    parse_strategy,
    validate_no_cycle,
    validate_parent,
)
from branchflow.errors import (
    BranchExistsError,
    BranchHasDependentsError,
    BranchNotFoundError,
    InvalidBranchTypeError,
    wrap_git_errors,
)
from branchflow.output import user_output

logger = logging.getLogger(__name__)


def _require_kind(config: FlowConfig, name: str, kind: BranchKind) -> BranchConfig:
    branch = config.get(name)
    if branch is None:
        raise BranchNotFoundError(name)
    if branch.kind != kind:
        raise InvalidBranchTypeError(branch.kind)
    return branch


def _save(ctx: FlowContext, branch: BranchConfig) -> None:
    with wrap_git_errors(f"save configuration of '{branch.name}'"):
        save_branch_config(ctx.git, ctx.require_repo().root, branch)


def add_base(
    ctx: FlowContext,
    name: str,
    parent: str | None = None,
    *,
    upstream_strategy: str = "none",
    downstream_strategy: str = "none",
    auto_update: bool = False,
) -> BranchConfig:
    """Configure a new base branch, creating the git branch when missing."""
    config = ctx.load_initialized_config()
    name = validate_branch_name(name)
    if config.get(name) is not None:
        raise BranchExistsError(name)
    if parent:
        validate_parent(config, parent)
        validate_no_cycle(config, name, parent)

    branch = BranchConfig(
        name=name,
        kind="base",
        parent=parent or None,
        upstream_strategy=parse_strategy(upstream_strategy),
        downstream_strategy=parse_strategy(downstream_strategy),
        auto_update=auto_update,
    )
    _save(ctx, branch)

    cwd = ctx.require_repo().root
    if not ctx.git.branch.branch_exists(cwd, name):
        start_point = parent or ctx.git.branch.get_current_branch(cwd)
        if start_point is None:
            raise BranchNotFoundError("HEAD")
        with wrap_git_errors(f"create branch '{name}'"):
            ctx.git.branch.create_branch(cwd, name, start_point)
        user_output(f"Created branch '{name}' from '{start_point}'")

    user_output(f"Added base branch '{name}'")
    return branch


def add_topic(
    ctx: FlowContext,
    name: str,
    parent: str,
    *,
    prefix: str | None = None,
    start_point: str | None = None,
    upstream_strategy: str = "merge",
    downstream_strategy: str = "rebase",
    tag: bool = False,
    tag_prefix: str = "",
) -> BranchConfig:
    """Configure a new topic type."""
    config = ctx.load_initialized_config()
    name = validate_branch_name(name)
    if config.get(name) is not None:
        raise BranchExistsError(name)
    validate_parent(config, parent)
    if start_point:
        validate_parent(config, start_point)

    branch = BranchConfig(
        name=name,
        kind="topic",
        parent=parent,
        prefix=prefix if prefix is not None else f"{name}/",
        upstream_strategy=parse_strategy(upstream_strategy),
        downstream_strategy=parse_strategy(downstream_strategy),
        start_point=start_point or None,
        tag=tag,
        tag_prefix=tag_prefix,
    )
    _save(ctx, branch)
    user_output(f"Added topic branch type '{name}'")
    return branch


def edit_branch(
    ctx: FlowContext,
    kind: BranchKind,
    name: str,
    *,
    parent: str | None = None,
    upstream_strategy: str | None = None,
    downstream_strategy: str | None = None,
    auto_update: bool | None = None,
    prefix: str | None = None,
    start_point: str | None = None,
    tag: bool | None = None,
    tag_prefix: str | None = None,
) -> BranchConfig:
    """Change the given fields of a base branch or topic type; None leaves a field as is."""
    config = ctx.load_initialized_config()
    branch = _require_kind(config, name, kind)

    if parent is not None:
        validate_parent(config, parent)
        if kind == "base":
            validate_no_cycle(config, name, parent)
        branch = replace(branch, parent=parent)
    if upstream_strategy is not None:
        branch = replace(branch, upstream_strategy=parse_strategy(upstream_strategy))
    if downstream_strategy is not None:
        branch = replace(branch, downstream_strategy=parse_strategy(downstream_strategy))
    if auto_update is not None and kind == "base":
        branch = replace(branch, auto_update=auto_update)
    if prefix is not None and kind == "topic":
        branch = replace(branch, prefix=prefix)
    if start_point is not None and kind == "topic":
        if start_point:
            validate_parent(config, start_point)
        branch = replace(branch, start_point=start_point or None)
    if tag is not None and kind == "topic":
        branch = replace(branch, tag=tag)
    if tag_prefix is not None:
        branch = replace(branch, tag_prefix=tag_prefix)

    _save(ctx, branch)
    user_output(f"Updated {kind} branch '{name}'")
    return branch


def rename_branch_config(ctx: FlowContext, kind: BranchKind, old_name: str, new_name: str) -> None:
    """Rename a base branch or topic type.

    Renaming a base also renames the git branch and repoints the parent and
    start point of everything that referred to it.
    """
    config = ctx.load_initialized_config()
    branch = _require_kind(config, old_name, kind)
    new_name = validate_branch_name(new_name)
    if config.get(new_name) is not None:
        raise BranchExistsError(new_name)

    cwd = ctx.require_repo().root
    if kind == "base" and ctx.git.branch.branch_exists(cwd, old_name):
        if ctx.git.branch.branch_exists(cwd, new_name):
            raise BranchExistsError(new_name)
        with wrap_git_errors(f"rename branch '{old_name}' to '{new_name}'"):
            ctx.git.branch.rename_branch(cwd, old_name, new_name)

    with wrap_git_errors(f"remove configuration of '{old_name}'"):
        remove_branch_config(ctx.git, cwd, old_name)
    _save(ctx, replace(branch, name=new_name))

    if kind == "base":
        for other in config.branches:
            if other.name == old_name:
                continue
            updated = other
            if other.parent == old_name:
                updated = replace(updated, parent=new_name)
            if other.start_point == old_name:
                updated = replace(updated, start_point=new_name)
            if updated != other:
                _save(ctx, updated)

    user_output(f"Renamed {kind} branch '{old_name}' to '{new_name}'")


def delete_branch_config(ctx: FlowContext, kind: BranchKind, name: str) -> None:
    """Remove a base branch or topic type from the configuration.

    The git branch itself is left alone.
    """
    config = ctx.load_initialized_config()
    _require_kind(config, name, kind)
    if kind == "base":
        dependents = dependents_of(config, name)
        if dependents:
            raise BranchHasDependentsError(name, dependents[0].name)

    with wrap_git_errors(f"remove configuration of '{name}'"):
        remove_branch_config(ctx.git, ctx.require_repo().root, name)
    user_output(f"Deleted {kind} branch configuration '{name}'")
