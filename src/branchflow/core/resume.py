"""Continue or abort whichever operation is paused."""

import logging

from branchflow.core.context import FlowContext
from branchflow.core.finish import FinishOrchestrator, FinishResult
from branchflow.core.finish_options import FinishFlags
from branchflow.core.merge_strategy import MergeStrategyExecutor
from branchflow.core.operation_state import MergeOperationState
from branchflow.core.topology import MergeStrategy
from branchflow.core.update import UpdateOrchestrator, UpdateResult
from branchflow.errors import NoMergeInProgressError, wrap_git_errors
from branchflow.output import user_output

logger = logging.getLogger(__name__)


def continue_operation(
    ctx: FlowContext, flags: FinishFlags | None = None
) -> FinishResult | UpdateResult:
    """Resume the paused finish or update.

    Raises:
        NoMergeInProgressError: If nothing is paused
    """
    state = ctx.state_store().load()
    if state is None:
        raise NoMergeInProgressError()
    if flags is None:
        flags = FinishFlags()

    if state.action == "update":
        return UpdateOrchestrator(ctx).resume(update_message=flags.update_message)
    return FinishOrchestrator(ctx).resume(flags)


def paused_strategy(state: MergeOperationState) -> MergeStrategy:
    """Strategy of the step the operation stopped in."""
    if state.current_step == "update_children" and state.current_child_branch:
        return state.child_strategies.get(state.current_child_branch) or "merge"
    return state.merge_strategy


def abort_operation(ctx: FlowContext) -> MergeOperationState:
    """Abort the paused merge or rebase, return to the original branch and drop the record.

    Steps that already completed (a merge into the parent, a tag, updated
    children) are not undone.
    """
    store = ctx.state_store()
    state = store.load()
    if state is None:
        raise NoMergeInProgressError()

    cwd = ctx.require_repo().root
    strategy = paused_strategy(state)
    logger.debug("Aborting %s of %s (%s)", state.action, state.full_branch_name, strategy)
    MergeStrategyExecutor(ctx.git, cwd).abort(strategy)

    if ctx.git.branch.branch_exists(cwd, state.full_branch_name):
        with wrap_git_errors(f"checkout original branch '{state.full_branch_name}'"):
            ctx.git.branch.checkout_branch(cwd, state.full_branch_name)

    store.clear()
    user_output(f"Aborted {state.action} of '{state.full_branch_name}'")
    return state
