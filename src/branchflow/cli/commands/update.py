"""Update command: bring a branch up to date with its parent."""

from typing import TypeVar

import click

from branchflow.cli.ensure import Ensure
from branchflow.core.context import FlowContext
from branchflow.core.finish_options import FinishFlags
from branchflow.core.resume import abort_operation, continue_operation
from branchflow.core.update import UpdateOrchestrator, UpdateRequest

F = TypeVar("F")


def run_update(
    ctx: FlowContext,
    *,
    branch_type: str | None,
    name: str | None,
    continue_op: bool,
    abort_op: bool,
    rebase: bool,
    update_message: str | None,
    no_verify: bool,
) -> None:
    Ensure.invariant(not (continue_op and abort_op), "--continue and --abort cannot be combined")
    if abort_op:
        abort_operation(ctx)
        return
    if continue_op:
        continue_operation(ctx, FinishFlags(update_message=update_message))
        return
    UpdateOrchestrator(ctx).update(
        UpdateRequest(
            branch=name,
            branch_type=branch_type,
            rebase=rebase,
            update_message=update_message,
            no_verify=no_verify,
        )
    )


def update_options(command: F) -> F:
    """Options shared by `update` and `<type> update`."""
    decorators = [
        click.option(
            "-c",
            "--continue",
            "continue_op",
            is_flag=True,
            help="Continue after resolving conflicts.",
        ),
        click.option("-a", "--abort", "abort_op", is_flag=True, help="Abort the paused update."),
        click.option("--rebase", is_flag=True, help="Rebase instead of the configured strategy."),
        click.option("--update-message", default=None, help="Merge or squash commit message."),
        click.option("--no-verify", is_flag=True, help="Skip commit hooks."),
    ]
    for decorator in reversed(decorators):
        command = decorator(command)
    return command


@click.command("update")
@click.argument("branch", required=False)
@update_options
@click.pass_obj
def update_cmd(
    ctx: FlowContext,
    branch: str | None,
    continue_op: bool,
    abort_op: bool,
    rebase: bool,
    update_message: str | None,
    no_verify: bool,
) -> None:
    """Update BRANCH (default: the current branch) from its parent branch."""
    run_update(
        ctx,
        branch_type=None,
        name=branch,
        continue_op=continue_op,
        abort_op=abort_op,
        rebase=rebase,
        update_message=update_message,
        no_verify=no_verify,
    )
