"""Finish a topic branch: merge, tag, cascade, clean up.

The orchestrator is a resumable state machine over the steps

    merge -> create_tag -> update_children -> delete_branch

Before the first mutation the operation record is persisted; it is rewritten
at every step boundary. A conflict in any merge-like step leaves the record
in place, prints a conflict report and raises MergeConflictError, and a later
`--continue` re-enters the machine at the step that paused.
"""

import logging
from dataclasses import dataclass, replace
from typing import NoReturn

import click

from branchflow.core.branch_names import require_prefix, resolve_topic_branch
from branchflow.core.config_store import unset_stored_base
from branchflow.core.conflict_report import format_conflict_report
from branchflow.core.context import FlowContext
from branchflow.core.finish_options import (
    FinishFlags,
    ResolvedFinishOptions,
    flags_to_persist,
    resolve_finish_options,
    restore_flags,
)
from branchflow.core.hooks import FlowHooks, HookContext
from branchflow.core.merge_strategy import (
    MergeConflict,
    MergeFatal,
    MergeOptions,
    MergeOutcome,
    MergeStrategyExecutor,
    default_child_squash_message,
)
from branchflow.core.operation_state import (
    MergeOperationState,
    OperationStateStore,
    ensure_no_operation_in_progress,
)
from branchflow.core.placeholders import expand_message_placeholders
from branchflow.core.sync import check_finish_sync
from branchflow.core.topology import (
    BranchConfig,
    FlowConfig,
    cascade_set,
    resolve_merge_target,
    short_name,
)
from branchflow.errors import (
    BranchNotFoundError,
    GitOperationError,
    MergeConflictError,
    NoMergeInProgressError,
    UnresolvedConflictsError,
    wrap_git_errors,
)
from branchflow.output import user_output

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinishRequest:
    """A finish invocation.

    Attributes:
        branch_type: Topic type ("feature")
        name: Branch name with or without the prefix; None finishes the
            current branch
        force: Skip the remote sync gate and allow a branch without the prefix
        flags: Command-line finish options
    """

    branch_type: str
    name: str | None = None
    force: bool = False
    flags: FinishFlags = FinishFlags()


@dataclass(frozen=True)
class FinishResult:
    branch: str
    parent: str
    tag_name: str | None
    updated_branches: tuple[str, ...]


# ============================================================================
# Shared pause and failure handling
# ============================================================================


def pause_operation(
    store: OperationStateStore,
    state: MergeOperationState,
    conflict: MergeConflict,
    *,
    tag_name: str | None = None,
) -> NoReturn:
    """Persist the record and stop with the conflict report."""
    store.save(state)
    report = format_conflict_report(state, conflict.files, tag_name=tag_name)
    logger.debug("Paused %s at step %s", state.full_branch_name, state.current_step)
    raise MergeConflictError(report)


def fail_operation(
    store: OperationStateStore, state: MergeOperationState, fatal: MergeFatal, operation: str
) -> NoReturn:
    """Persist the record and raise the backend failure.

    The record is kept so the user can inspect the repository and --abort.
    """
    store.save(state)
    raise GitOperationError(operation, fatal.message)


def child_merge_options(state: MergeOperationState, child: str, parent: str) -> MergeOptions:
    """Options for bringing `child` up to date with `parent`."""
    message = None
    squash_message = default_child_squash_message(child, parent)
    if state.update_message:
        message = expand_message_placeholders(state.update_message, branch=child, parent=parent)
        squash_message = message
    return MergeOptions(
        no_ff=True,
        no_verify=state.no_verify,
        message=message,
        squash_message=squash_message,
        rebase_direction="branch",
    )


class FinishOrchestrator:
    """Drives finish, finish --continue and finish --abort."""

    def __init__(self, ctx: FlowContext) -> None:
        self._ctx = ctx
        self._git = ctx.git
        self._cwd = ctx.require_repo().root
        self._store = ctx.state_store()
        self._executor = MergeStrategyExecutor(self._git, self._cwd)

    # ============================================================================
    # Entry points
    # ============================================================================

    def finish(self, request: FinishRequest) -> FinishResult:
        config = self._ctx.load_initialized_config()
        topic = config.require_topic_type(request.branch_type)
        ensure_no_operation_in_progress(self._store)

        branch = self._resolve_branch(topic, request.name)
        require_prefix(topic, branch, force=request.force)
        short = short_name(topic, branch)
        options = resolve_finish_options(config, topic, short, request.flags)
        parent = resolve_merge_target(config, topic.name)

        if options.fetch:
            self._fetch(config.remote, parent, branch)
        if not request.force:
            check_finish_sync(self._git, self._cwd, branch, branch_type=topic.name)
        if not self._git.branch.branch_exists(self._cwd, parent):
            raise BranchNotFoundError(parent)

        hooks = self._ctx.hooks()
        context = self._hook_context(config, topic, short, branch, parent, options)
        hooks.run_pre_hook("finish", context)

        cascade = cascade_set(config, parent)
        state = MergeOperationState(
            action="finish",
            branch_type=topic.name,
            branch_name=short,
            full_branch_name=branch,
            parent_branch=parent,
            merge_strategy=options.strategy,
            current_step="merge",
            child_branches=tuple(entry.branch for entry in cascade),
            child_strategies={entry.branch: entry.strategy for entry in cascade},
            child_parents={entry.branch: entry.parent for entry in cascade},
            squash_message=options.squash_message or "",
            merge_message=options.merge_message or "",
            update_message=options.update_message or "",
            no_verify=options.no_verify,
            target_head=self._git.branch.get_branch_head(self._cwd, parent) or "",
            finish_flags=flags_to_persist(request.flags),
        )
        self._store.save(state)
        logger.debug("Finishing %s into %s, cascade=%s", branch, parent, state.child_branches)

        user_output(f"Merging '{branch}' into '{parent}' using {options.strategy} strategy")
        outcome = self._executor.apply(
            options.strategy, branch, parent, self._upstream_options(state, options)
        )
        state = self._after_step(state, outcome, options, f"merge '{branch}' into '{parent}'")
        return self._run_from(state, config, topic, options, hooks)

    def resume(self, flags: FinishFlags) -> FinishResult:
        """Continue a paused finish after the user resolved the conflicts."""
        state = self._store.load()
        if state is None or state.action != "finish":
            raise NoMergeInProgressError()

        if self._git.merge.get_unmerged_files(self._cwd):
            raise UnresolvedConflictsError()

        config = self._ctx.load_initialized_config()
        topic = config.require_topic_type(state.branch_type)
        flags = restore_flags(flags, state.finish_flags)
        options = resolve_finish_options(config, topic, state.branch_name, flags)
        state = replace(
            state,
            squash_message=flags.squash_message or state.squash_message,
            merge_message=flags.merge_message or state.merge_message,
            update_message=flags.update_message or state.update_message,
            no_verify=flags.no_verify if flags.no_verify is not None else state.no_verify,
            finish_flags=flags_to_persist(flags),
        )
        self._store.save(state)
        logger.debug(
            "Continuing %s at step %s (child=%s)",
            state.full_branch_name,
            state.current_step,
            state.current_child_branch or "-",
        )

        if state.current_step == "merge":
            outcome = self._executor.resume(
                state.merge_strategy,
                state.full_branch_name,
                state.parent_branch,
                self._upstream_options(state, options),
                target_head=state.target_head,
            )
            state = self._after_step(
                state,
                outcome,
                options,
                f"merge '{state.full_branch_name}' into '{state.parent_branch}'",
            )
        elif state.current_step == "update_children" and state.current_child_branch:
            child = state.current_child_branch
            parent = state.child_parents.get(child) or state.parent_branch
            strategy = state.child_strategies.get(child) or "merge"
            outcome = self._executor.resume(
                strategy,
                parent,
                child,
                child_merge_options(state, child, parent),
                target_head=state.target_head,
            )
            state = self._after_child(state, child, parent, outcome, options)

        return self._run_from(state, config, topic, options, self._ctx.hooks())

    # ============================================================================
    # Steps
    # ============================================================================

    def _run_from(
        self,
        state: MergeOperationState,
        config: FlowConfig,
        topic: BranchConfig,
        options: ResolvedFinishOptions,
        hooks: FlowHooks,
    ) -> FinishResult:
        context = self._hook_context(
            config,
            topic,
            state.branch_name,
            state.full_branch_name,
            state.parent_branch,
            options,
        )
        if state.current_step == "create_tag":
            state = self._create_tag(state, options, hooks, context)
        if state.current_step == "update_children":
            state = self._update_children(state, options)
        return self._cleanup(state, config, options, hooks, context)

    def _create_tag(
        self,
        state: MergeOperationState,
        options: ResolvedFinishOptions,
        hooks: FlowHooks,
        context: HookContext,
    ) -> MergeOperationState:
        if options.should_tag:
            message = hooks.run_tag_message_filter(context, state.branch_name, options.tag_message)
            if self._git.tag.tag_exists(self._cwd, options.tag_name):
                logger.debug("Tag %s already exists, skipping", options.tag_name)
            else:
                with wrap_git_errors(f"create tag '{options.tag_name}'"):
                    self._git.tag.create_tag(
                        self._cwd,
                        options.tag_name,
                        ref=state.parent_branch,
                        message=message,
                        message_file=options.message_file,
                        sign=options.sign,
                        signing_key=options.signing_key,
                    )
                user_output(f"Created tag '{options.tag_name}'")

        state = state.with_step("update_children")
        self._store.save(state)
        return state

    def _update_children(
        self, state: MergeOperationState, options: ResolvedFinishOptions
    ) -> MergeOperationState:
        for child in state.pending_children():
            parent = state.child_parents.get(child) or state.parent_branch
            strategy = state.child_strategies.get(child) or "merge"

            head = self._git.branch.get_branch_head(self._cwd, child) or ""
            state = state.with_current_child(child, target_head=head)
            self._store.save(state)
            user_output(f"Updating child base branch '{child}' from '{parent}'...")

            outcome = self._executor.apply(
                strategy, parent, child, child_merge_options(state, child, parent)
            )
            state = self._after_child(state, child, parent, outcome, options)

        state = state.with_step("delete_branch")
        self._store.save(state)
        return state

    def _cleanup(
        self,
        state: MergeOperationState,
        config: FlowConfig,
        options: ResolvedFinishOptions,
        hooks: FlowHooks,
        context: HookContext,
    ) -> FinishResult:
        branch = state.full_branch_name
        with wrap_git_errors(f"checkout parent branch '{state.parent_branch}'"):
            self._git.branch.checkout_branch(self._cwd, state.parent_branch)

        if not options.keep_remote and self._git.remote.remote_branch_exists(
            self._cwd, config.remote, branch
        ):
            with wrap_git_errors(f"delete remote branch '{config.remote}/{branch}'"):
                self._git.remote.delete_remote_branch(self._cwd, config.remote, branch)

        if not options.keep_local:
            force = options.force_delete or state.merge_strategy in ("squash", "none")
            with wrap_git_errors(f"delete branch '{branch}'"):
                self._git.branch.delete_branch(self._cwd, branch, force=force)
            try:
                unset_stored_base(self._git, self._cwd, branch)
            except RuntimeError as e:
                user_output(
                    click.style("Warning: ", fg="yellow") + f"failed to clean up base config: {e}"
                )

        self._store.clear()
        user_output(
            f"Successfully finished branch '{branch}' and updated "
            f"{len(state.updated_branches)} child base branches"
        )
        hooks.run_post_hook("finish", context, exit_code=0)

        return FinishResult(
            branch=branch,
            parent=state.parent_branch,
            tag_name=options.tag_name if options.should_tag else None,
            updated_branches=state.updated_branches,
        )

    # ============================================================================
    # Helpers
    # ============================================================================

    def _after_step(
        self,
        state: MergeOperationState,
        outcome: MergeOutcome,
        options: ResolvedFinishOptions,
        operation: str,
    ) -> MergeOperationState:
        if isinstance(outcome, MergeConflict):
            pause_operation(self._store, state, outcome, tag_name=self._tag_name(options))
        if isinstance(outcome, MergeFatal):
            fail_operation(self._store, state, outcome, operation)
        state = state.with_step("create_tag")
        self._store.save(state)
        return state

    def _after_child(
        self,
        state: MergeOperationState,
        child: str,
        parent: str,
        outcome: MergeOutcome,
        options: ResolvedFinishOptions,
    ) -> MergeOperationState:
        if isinstance(outcome, MergeConflict):
            pause_operation(self._store, state, outcome, tag_name=self._tag_name(options))
        if isinstance(outcome, MergeFatal):
            fail_operation(self._store, state, outcome, f"update '{child}' from '{parent}'")
        state = state.with_child_updated(child)
        self._store.save(state)
        return state

    def _upstream_options(
        self, state: MergeOperationState, options: ResolvedFinishOptions
    ) -> MergeOptions:
        branch = state.full_branch_name
        parent = state.parent_branch
        message = None
        squash_message = None
        if state.merge_message:
            message = expand_message_placeholders(state.merge_message, branch=branch, parent=parent)
        if state.squash_message:
            squash_message = expand_message_placeholders(
                state.squash_message, branch=branch, parent=parent
            )
        return MergeOptions(
            no_ff=options.no_ff,
            no_verify=state.no_verify,
            message=message,
            squash_message=squash_message,
            preserve_merges=options.preserve_merges,
            rebase_direction="topic",
        )

    def _resolve_branch(self, topic: BranchConfig, name: str | None) -> str:
        if name is None:
            current = self._git.branch.get_current_branch(self._cwd)
            if current is None:
                raise BranchNotFoundError("HEAD")
            return current
        return resolve_topic_branch(self._git, self._cwd, topic, name)

    def _fetch(self, remote: str, parent: str, branch: str) -> None:
        user_output(f"Fetching from remote '{remote}'...")
        for name, label in ((parent, "base"), (branch, "topic")):
            try:
                self._git.remote.fetch_branch(self._cwd, remote, name)
            except RuntimeError as e:
                user_output(f"Note: Could not fetch {label} branch '{name}': {e}")

    def _hook_context(
        self,
        config: FlowConfig,
        topic: BranchConfig,
        short: str,
        branch: str,
        parent: str,
        options: ResolvedFinishOptions,
    ) -> HookContext:
        return HookContext(
            branch_type=topic.name,
            branch_name=short,
            full_branch=branch,
            base_branch=parent,
            origin=config.remote,
            version=short if options.should_tag else None,
        )

    def _tag_name(self, options: ResolvedFinishOptions) -> str | None:
        return options.tag_name if options.should_tag else None
