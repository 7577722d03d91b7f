"""Status command: show the paused operation, if any."""

import click
from rich.console import Console
from rich.table import Table

from branchflow.core.context import FlowContext
from branchflow.core.operation_state import MergeOperationState
from branchflow.output import user_output


def render_state_table(state: MergeOperationState) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold", no_wrap=True)
    table.add_column("Value")

    table.add_row("Action", state.action)
    table.add_row("Branch", state.full_branch_name)
    table.add_row("Parent", state.parent_branch)
    table.add_row("Strategy", state.merge_strategy)
    table.add_row("Step", state.current_step)
    if state.child_branches:
        table.add_row("Children", ", ".join(state.child_branches))
        table.add_row("Updated", ", ".join(state.updated_branches) or "-")
    if state.current_child_branch:
        table.add_row("Updating", state.current_child_branch)
    return table


@click.command("status")
@click.pass_obj
def status_cmd(ctx: FlowContext) -> None:
    """Show the finish or update operation that is waiting for --continue."""
    state = ctx.state_store().load()
    if state is None:
        user_output("No operation in progress")
        return

    console = Console(stderr=True, width=200)
    console.print(render_state_table(state))
    unmerged = ctx.git.merge.get_unmerged_files(ctx.require_repo().root)
    if unmerged:
        user_output("")
        user_output("Unresolved conflicts:")
        for path in unmerged:
            user_output(f"  {path}")
