"""Initialize git-flow in a repository."""

import logging

from branchflow.core.config_store import remove_branch_config, save_flow_config
from branchflow.core.context import FlowContext
from branchflow.core.topology import (
    BranchConfig,
    FlowConfig,
    base_branches,
    children_of,
    root_branches,
)
from branchflow.errors import AlreadyInitializedError, BranchNotFoundError, wrap_git_errors
from branchflow.gateway.git.config_ops.types import ConfigScope
from branchflow.output import user_output

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit"


def bases_parents_first(config: FlowConfig) -> list[BranchConfig]:
    """Base branches ordered so that every parent precedes its children."""
    ordered: list[BranchConfig] = []

    def visit(branch: BranchConfig) -> None:
        ordered.append(branch)
        for child in children_of(config, branch.name):
            if child not in ordered:
                visit(child)

    for root in root_branches(config):
        visit(root)
    # Bases whose parent is not configured as a base still get created last
    ordered.extend(branch for branch in base_branches(config) if branch not in ordered)
    return ordered


def init_flow(
    ctx: FlowContext,
    config: FlowConfig,
    *,
    scope: ConfigScope,
    force: bool = False,
    create_branches: bool = True,
) -> list[str]:
    """Write the configuration and create missing base branches.

    Returns the base branches that were created.
    """
    repo = ctx.require_repo()
    existing = ctx.load_config()
    if existing.initialized and not force:
        raise AlreadyInitializedError()

    if existing.initialized:
        for branch in existing.branches:
            if config.get(branch.name) is None:
                with wrap_git_errors(f"remove config of '{branch.name}'"):
                    remove_branch_config(ctx.git, repo.root, branch.name, scope=scope)

    with wrap_git_errors("save configuration"):
        save_flow_config(ctx.git, repo.root, config, scope=scope)
    logger.debug("Initialized flow config with %d branch configs", len(config.branches))

    created: list[str] = []
    if create_branches:
        created = _create_base_branches(ctx, config)

    user_output("Initialized git-flow in this repository")
    return created


def _create_base_branches(ctx: FlowContext, config: FlowConfig) -> list[str]:
    git = ctx.git
    cwd = ctx.require_repo().root

    if not git.repo.has_commits(cwd):
        with wrap_git_errors("create initial commit"):
            git.repo.create_initial_commit(cwd, INITIAL_COMMIT_MESSAGE)
        user_output("Created initial commit")

    current = git.branch.get_current_branch(cwd)
    created: list[str] = []
    for branch in bases_parents_first(config):
        if git.branch.branch_exists(cwd, branch.name):
            continue
        start_point = branch.parent or current
        if start_point is None:
            raise BranchNotFoundError("HEAD")
        with wrap_git_errors(f"create branch '{branch.name}'"):
            git.branch.create_branch(cwd, branch.name, start_point)
        created.append(branch.name)
        user_output(f"Created branch '{branch.name}' from '{start_point}'")
    return created
