"""Bring a branch up to date with its configured parent."""

import logging
from dataclasses import dataclass, replace

from branchflow.core.branch_names import resolve_topic_branch
from branchflow.core.context import FlowContext
from branchflow.core.finish import child_merge_options, fail_operation, pause_operation
from branchflow.core.hooks import HookContext
from branchflow.core.merge_strategy import (
    MergeConflict,
    MergeFatal,
    MergeOutcome,
    MergeStrategyExecutor,
)
from branchflow.core.operation_state import MergeOperationState, ensure_no_operation_in_progress
from branchflow.core.topology import (
    BranchConfig,
    FlowConfig,
    MergeStrategy,
    short_name,
    topic_type_for_branch,
)
from branchflow.errors import (
    BranchNotFoundError,
    ConfigurationError,
    MergeConflictError,
    NoMergeInProgressError,
    UnresolvedConflictsError,
)
from branchflow.output import user_output

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateRequest:
    """An update invocation.

    Attributes:
        branch: Branch to update; None updates the current branch
        branch_type: Topic type when invoked as `<type> update`; the name
            may then omit the prefix
        rebase: True forces the rebase strategy
        update_message: Merge or squash commit message (placeholders allowed)
        no_verify: Skip commit hooks
    """

    branch: str | None = None
    branch_type: str | None = None
    rebase: bool = False
    update_message: str | None = None
    no_verify: bool = False


@dataclass(frozen=True)
class UpdateResult:
    branch: str
    parent: str
    strategy: MergeStrategy


def resolve_update_parent(
    config: FlowConfig, branch: str
) -> tuple[str, MergeStrategy, BranchConfig]:
    """Parent and downstream strategy of a base branch or a topic branch."""
    branch_config = config.get(branch)
    if branch_config is None or not branch_config.is_base:
        branch_config = topic_type_for_branch(config, branch)
    if branch_config is None:
        raise ConfigurationError(
            f"branch '{branch}' is neither a configured base branch nor a topic branch"
        )
    if not branch_config.parent:
        raise ConfigurationError(f"branch '{branch}' has no parent branch to update from")
    return branch_config.parent, branch_config.downstream_strategy, branch_config


class UpdateOrchestrator:
    """Drives update, update --continue and update --abort."""

    def __init__(self, ctx: FlowContext) -> None:
        self._ctx = ctx
        self._git = ctx.git
        self._cwd = ctx.require_repo().root
        self._store = ctx.state_store()
        self._executor = MergeStrategyExecutor(self._git, self._cwd)

    def update(self, request: UpdateRequest) -> UpdateResult:
        config = self._ctx.load_initialized_config()
        ensure_no_operation_in_progress(self._store)

        branch = self._resolve_branch(config, request)
        parent, strategy, branch_config = resolve_update_parent(config, branch)
        if not self._git.branch.branch_exists(self._cwd, parent):
            raise BranchNotFoundError(parent)
        if request.rebase:
            strategy = "rebase"

        topic = branch_config if branch_config.is_topic else None
        hook_context = None
        if topic is not None:
            hook_context = HookContext(
                branch_type=topic.name,
                branch_name=short_name(topic, branch),
                full_branch=branch,
                base_branch=parent,
                origin=config.remote,
            )
            self._ctx.hooks().run_pre_hook("update", hook_context)

        state = MergeOperationState(
            action="update",
            branch_type=topic.name if topic is not None else "base",
            branch_name=short_name(topic, branch) if topic is not None else branch,
            full_branch_name=branch,
            parent_branch=parent,
            merge_strategy=strategy,
            current_step="merge",
            update_message=request.update_message or "",
            no_verify=request.no_verify,
            target_head=self._git.branch.get_branch_head(self._cwd, branch) or "",
        )
        self._store.save(state)

        user_output(f"Updating '{branch}' from '{parent}' using {strategy} strategy")
        try:
            outcome = self._executor.apply(
                strategy, parent, branch, child_merge_options(state, branch, parent)
            )
            self._settle(state, outcome)
        except MergeConflictError:
            raise
        except Exception:
            if hook_context is not None:
                self._ctx.hooks().run_post_hook("update", hook_context, exit_code=1)
            raise
        if hook_context is not None:
            self._ctx.hooks().run_post_hook("update", hook_context, exit_code=0)
        return UpdateResult(branch=branch, parent=parent, strategy=strategy)

    def resume(self, *, update_message: str | None = None) -> UpdateResult:
        """Continue a paused update after the user resolved the conflicts."""
        state = self._store.load()
        if state is None or state.action != "update":
            raise NoMergeInProgressError()

        if self._git.merge.get_unmerged_files(self._cwd):
            raise UnresolvedConflictsError()
        if update_message:
            state = replace(state, update_message=update_message)

        branch = state.full_branch_name
        parent = state.parent_branch
        logger.debug("Continuing update of %s from %s", branch, parent)
        outcome = self._executor.resume(
            state.merge_strategy,
            parent,
            branch,
            child_merge_options(state, branch, parent),
            target_head=state.target_head,
        )
        self._settle(state, outcome)
        return UpdateResult(branch=branch, parent=parent, strategy=state.merge_strategy)

    def _settle(self, state: MergeOperationState, outcome: MergeOutcome) -> None:
        branch = state.full_branch_name
        parent = state.parent_branch
        if isinstance(outcome, MergeConflict):
            pause_operation(self._store, state, outcome)
        if isinstance(outcome, MergeFatal):
            fail_operation(self._store, state, outcome, f"update '{branch}' from '{parent}'")
        self._store.clear()
        user_output(f"Successfully updated '{branch}' from '{parent}'")

    def _resolve_branch(self, config: FlowConfig, request: UpdateRequest) -> str:
        if request.branch is None:
            current = self._git.branch.get_current_branch(self._cwd)
            if current is None:
                raise BranchNotFoundError("HEAD")
            if request.branch_type is not None:
                topic = config.require_topic_type(request.branch_type)
                if topic.prefix and not current.startswith(topic.prefix):
                    raise ConfigurationError(
                        f"current branch '{current}' is not a {topic.name} branch"
                    )
            return current

        if request.branch_type is not None:
            topic = config.require_topic_type(request.branch_type)
            return resolve_topic_branch(self._git, self._cwd, topic, request.branch)
        if not self._git.branch.branch_exists(self._cwd, request.branch):
            raise BranchNotFoundError(request.branch)
        return request.branch
