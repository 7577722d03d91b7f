"""Overview command: base branches, topic types and active topic branches."""

import click
from rich.console import Console
from rich.table import Table

from branchflow.cli.commands.config import render_config_table
from branchflow.core.config_store import get_stored_base
from branchflow.core.context import FlowContext
from branchflow.core.topology import topic_types


@click.command("overview")
@click.pass_obj
def overview_cmd(ctx: FlowContext) -> None:
    """Show the configured workflow and the active topic branches."""
    config = ctx.load_initialized_config()
    cwd = ctx.require_repo().root
    console = Console(stderr=True, width=200)

    console.print("[bold]Workflow[/bold]")
    console.print(render_config_table(config))
    console.print()

    current = ctx.git.branch.get_current_branch(cwd)
    branches = sorted(ctx.git.branch.list_local_branches(cwd))

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("", no_wrap=True)
    table.add_column("Branch", style="yellow", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Base", no_wrap=True)

    found = False
    for topic in topic_types(config):
        for branch in branches:
            if not topic.prefix or not branch.startswith(topic.prefix):
                continue
            found = True
            base = get_stored_base(ctx.git, cwd, branch) or topic.parent or "-"
            table.add_row("*" if branch == current else "", branch, topic.name, base)

    console.print("[bold]Active topic branches[/bold]")
    if found:
        console.print(table)
    else:
        console.print("[dim]No active topic branches[/dim]")
