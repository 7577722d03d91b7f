"""Commands of a topic type group: `branchflow feature start`, `... finish`, etc.

The same set of commands is built for every topic type, so the group is
created by a factory rather than declared once.
"""

import click
from rich.console import Console
from rich.table import Table

from branchflow.cli.commands.update import run_update, update_options
from branchflow.cli.ensure import Ensure
from branchflow.core.context import FlowContext
from branchflow.core.finish import FinishOrchestrator, FinishRequest
from branchflow.core.finish_options import FinishFlags
from branchflow.core.resume import abort_operation, continue_operation
from branchflow.core.topic_ops import (
    checkout_branch,
    delete_branch,
    list_branches,
    publish_branch,
    rename_branch,
    start_branch,
    track_branch,
)
from branchflow.output import machine_output, user_output


def _start_command(branch_type: str) -> click.Command:
    @click.command("start")
    @click.argument("name")
    @click.argument("base", required=False)
    @click.option(
        "--fetch/--no-fetch", default=None, help="Fetch from the remote before creating."
    )
    @click.pass_obj
    def start(ctx: FlowContext, name: str, base: str | None, fetch: bool | None) -> None:
        """Start a new branch NAME, from BASE or the configured start point."""
        start_branch(ctx, branch_type, name, base, fetch=fetch)

    return start


# Flags that take a value or a tri-state boolean. Every one defaults to None so
# that an unset flag falls through to the configuration.
_FINISH_OPTIONS = [
    click.option("--tag/--notag", default=None, help="Create a tag on the parent."),
    click.option("--sign/--no-sign", default=None, help="Sign the tag."),
    click.option("-u", "--signingkey", "signing_key", default=None, help="Key to sign with."),
    click.option("-m", "--message", default=None, help="Tag message."),
    click.option(
        "--messagefile", "message_file", default=None, help="Read the tag message from a file."
    ),
    click.option("-T", "--tagname", "tag_name", default=None, help="Tag name to use."),
    click.option("--keep/--no-keep", default=None, help="Keep the branch locally and remotely."),
    click.option(
        "--keepremote/--no-keepremote", "keep_remote", default=None, help="Keep the remote branch."
    ),
    click.option(
        "--keeplocal/--no-keeplocal", "keep_local", default=None, help="Keep the local branch."
    ),
    click.option(
        "--force-delete/--no-force-delete", default=None, help="Force deletion of the branch."
    ),
    click.option("--rebase/--no-rebase", default=None, help="Rebase before merging."),
    click.option(
        "--preserve-merges/--no-preserve-merges",
        default=None,
        help="Keep merge commits when rebasing.",
    ),
    click.option("--no-ff/--ff", "no_ff", default=None, help="Always create a merge commit."),
    click.option("--squash/--no-squash", default=None, help="Squash the branch into one commit."),
    click.option("--squash-message", default=None, help="Squash commit message."),
    click.option("--merge-message", default=None, help="Merge commit message."),
    click.option("--update-message", default=None, help="Message for child branch updates."),
    click.option("--fetch/--no-fetch", default=None, help="Fetch from the remote first."),
    click.option("--no-verify/--verify", "no_verify", default=None, help="Skip commit hooks."),
]


def _finish_command(branch_type: str) -> click.Command:
    def finish(
        ctx: FlowContext,
        name: str | None,
        continue_op: bool,
        abort_op: bool,
        force: bool,
        **flag_values: bool | str | None,
    ) -> None:
        """Finish branch NAME (default: the current branch).

        Merges it into its parent, tags it when configured, updates the
        auto-updating child base branches and deletes it.
        """
        Ensure.invariant(
            not (continue_op and abort_op), "--continue and --abort cannot be combined"
        )
        flags = FinishFlags(**flag_values)  # type: ignore[arg-type]
        if abort_op:
            abort_operation(ctx)
            return
        if continue_op:
            continue_operation(ctx, flags)
            return
        FinishOrchestrator(ctx).finish(
            FinishRequest(branch_type=branch_type, name=name, force=force, flags=flags)
        )

    command = click.pass_obj(finish)
    for decorator in reversed(_FINISH_OPTIONS):
        command = decorator(command)
    command = click.option(
        "-f", "--force", is_flag=True, help="Finish even if out of sync or unprefixed."
    )(command)
    command = click.option(
        "-a", "--abort", "abort_op", is_flag=True, help="Abort the paused finish."
    )(command)
    command = click.option(
        "-c", "--continue", "continue_op", is_flag=True, help="Continue after resolving conflicts."
    )(command)
    command = click.argument("name", required=False)(command)
    return click.command("finish")(command)


def _publish_command(branch_type: str) -> click.Command:
    @click.command("publish")
    @click.argument("name", required=False)
    @click.option(
        "-o", "--push-option", "push_options", multiple=True, help="Option passed to git push."
    )
    @click.option("--no-push-option", is_flag=True, help="Ignore configured push options.")
    @click.pass_obj
    def publish(
        ctx: FlowContext, name: str | None, push_options: tuple[str, ...], no_push_option: bool
    ) -> None:
        """Push branch NAME (default: the current branch) to the remote."""
        publish_branch(
            ctx, branch_type, name, push_options=push_options, no_push_option=no_push_option
        )

    return publish


def _track_command(branch_type: str) -> click.Command:
    @click.command("track")
    @click.argument("name")
    @click.pass_obj
    def track(ctx: FlowContext, name: str) -> None:
        """Create a local branch that tracks the remote branch NAME."""
        track_branch(ctx, branch_type, name)

    return track


def _delete_command(branch_type: str) -> click.Command:
    @click.command("delete")
    @click.argument("name", required=False)
    @click.option("-f", "--force/--no-force", default=None, help="Delete even if unmerged.")
    @click.option("-r", "--remote/--no-remote", default=None, help="Delete the remote branch too.")
    @click.pass_obj
    def delete(
        ctx: FlowContext, name: str | None, force: bool | None, remote: bool | None
    ) -> None:
        """Delete branch NAME (default: the current branch)."""
        delete_branch(ctx, branch_type, name, force=force, remote=remote)

    return delete


def _rename_command(branch_type: str) -> click.Command:
    @click.command("rename")
    @click.argument("old_name")
    @click.argument("new_name")
    @click.pass_obj
    def rename(ctx: FlowContext, old_name: str, new_name: str) -> None:
        """Rename branch OLD_NAME to NEW_NAME."""
        rename_branch(ctx, branch_type, old_name, new_name)

    return rename


def _update_command(branch_type: str) -> click.Command:
    @click.command("update")
    @click.argument("name", required=False)
    @update_options
    @click.pass_obj
    def update(
        ctx: FlowContext,
        name: str | None,
        continue_op: bool,
        abort_op: bool,
        rebase: bool,
        update_message: str | None,
        no_verify: bool,
    ) -> None:
        """Update branch NAME (default: the current branch) from its base."""
        run_update(
            ctx,
            branch_type=branch_type,
            name=name,
            continue_op=continue_op,
            abort_op=abort_op,
            rebase=rebase,
            update_message=update_message,
            no_verify=no_verify,
        )

    return update


def _list_command(branch_type: str) -> click.Command:
    @click.command("list")
    @click.option("-v", "--verbose", is_flag=True, help="Show the base of each branch.")
    @click.pass_obj
    def list_cmd(ctx: FlowContext, verbose: bool) -> None:
        """List the existing branches of this type."""
        branches = list_branches(ctx, branch_type)
        if not branches:
            user_output(f"No {branch_type} branches exist")
            return

        if not verbose:
            for branch in branches:
                marker = "*" if branch.is_current else " "
                machine_output(f"{marker} {branch.short_name}")
            return

        table = Table(show_header=True, header_style="bold", box=None)
        table.add_column("", no_wrap=True)
        table.add_column("Name", style="yellow", no_wrap=True)
        table.add_column("Branch", no_wrap=True)
        table.add_column("Base", no_wrap=True)
        for branch in branches:
            table.add_row(
                "*" if branch.is_current else "",
                branch.short_name,
                branch.name,
                branch.base or "-",
            )
        Console(stderr=True, width=200).print(table)

    return list_cmd


def _checkout_command(branch_type: str) -> click.Command:
    @click.command("checkout")
    @click.argument("name")
    @click.pass_obj
    def checkout(ctx: FlowContext, name: str) -> None:
        """Check out branch NAME or the only branch whose name starts with it."""
        checkout_branch(ctx, branch_type, name)

    return checkout


def make_topic_group(branch_type: str) -> click.Group:
    """Build the `branchflow <branch_type>` command group."""
    group = click.Group(branch_type, help=f"Manage {branch_type} branches.")
    for factory in (
        _start_command,
        _finish_command,
        _publish_command,
        _track_command,
        _delete_command,
        _rename_command,
        _update_command,
        _list_command,
        _checkout_command,
    ):
        group.add_command(factory(branch_type))
    return group
