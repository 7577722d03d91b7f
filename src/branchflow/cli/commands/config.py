"""Config commands: manage base branches and topic types."""

import click
from rich.console import Console
from rich.table import Table

from branchflow.core.config_edit import (
    add_base,
    add_topic,
    delete_branch_config,
    edit_branch,
    rename_branch_config,
)
from branchflow.core.context import FlowContext
from branchflow.core.init_flow import bases_parents_first
from branchflow.core.topology import (
    MERGE_STRATEGIES,
    BranchConfig,
    BranchKind,
    FlowConfig,
    topic_types,
)

_KINDS = click.Choice(["base", "topic"])
_STRATEGY = click.Choice(MERGE_STRATEGIES, case_sensitive=False)


@click.group("config")
def config_group() -> None:
    """Manage the branch configuration."""


# ============================================================================
# add
# ============================================================================


@config_group.group("add")
def config_add() -> None:
    """Add a base branch or topic type."""


@config_add.command("base")
@click.argument("name")
@click.argument("parent", required=False)
@click.option("--upstream-strategy", type=_STRATEGY, default="none", show_default=True)
@click.option("--downstream-strategy", type=_STRATEGY, default="none", show_default=True)
@click.option("--auto-update/--no-auto-update", default=False, show_default=True)
@click.pass_obj
def config_add_base(
    ctx: FlowContext,
    name: str,
    parent: str | None,
    upstream_strategy: str,
    downstream_strategy: str,
    auto_update: bool,
) -> None:
    """Add base branch NAME, optionally below PARENT."""
    add_base(
        ctx,
        name,
        parent,
        upstream_strategy=upstream_strategy,
        downstream_strategy=downstream_strategy,
        auto_update=auto_update,
    )


@config_add.command("topic")
@click.argument("name")
@click.argument("parent")
@click.option("--prefix", default=None, help="Branch name prefix (default: NAME/).")
@click.option("--starting-point", default=None, help="Base branch new branches start from.")
@click.option("--upstream-strategy", type=_STRATEGY, default="merge", show_default=True)
@click.option("--downstream-strategy", type=_STRATEGY, default="rebase", show_default=True)
@click.option("--tag/--no-tag", default=False, show_default=True)
@click.option("--tag-prefix", default="", help="Prefix of tags created on finish.")
@click.pass_obj
def config_add_topic(
    ctx: FlowContext,
    name: str,
    parent: str,
    prefix: str | None,
    starting_point: str | None,
    upstream_strategy: str,
    downstream_strategy: str,
    tag: bool,
    tag_prefix: str,
) -> None:
    """Add topic type NAME whose branches finish into PARENT."""
    add_topic(
        ctx,
        name,
        parent,
        prefix=prefix,
        start_point=starting_point,
        upstream_strategy=upstream_strategy,
        downstream_strategy=downstream_strategy,
        tag=tag,
        tag_prefix=tag_prefix,
    )


# ============================================================================
# edit / rename / delete
# ============================================================================


@config_group.command("edit")
@click.argument("kind", type=_KINDS)
@click.argument("name")
@click.option("--parent", default=None)
@click.option("--upstream-strategy", type=_STRATEGY, default=None)
@click.option("--downstream-strategy", type=_STRATEGY, default=None)
@click.option("--auto-update/--no-auto-update", default=None)
@click.option("--prefix", default=None)
@click.option("--starting-point", default=None)
@click.option("--tag/--no-tag", default=None)
@click.option("--tag-prefix", default=None)
@click.pass_obj
def config_edit(
    ctx: FlowContext,
    kind: BranchKind,
    name: str,
    parent: str | None,
    upstream_strategy: str | None,
    downstream_strategy: str | None,
    auto_update: bool | None,
    prefix: str | None,
    starting_point: str | None,
    tag: bool | None,
    tag_prefix: str | None,
) -> None:
    """Change settings of base branch or topic type NAME."""
    edit_branch(
        ctx,
        kind,
        name,
        parent=parent,
        upstream_strategy=upstream_strategy,
        downstream_strategy=downstream_strategy,
        auto_update=auto_update,
        prefix=prefix,
        start_point=starting_point,
        tag=tag,
        tag_prefix=tag_prefix,
    )


@config_group.command("rename")
@click.argument("kind", type=_KINDS)
@click.argument("old_name")
@click.argument("new_name")
@click.pass_obj
def config_rename(ctx: FlowContext, kind: BranchKind, old_name: str, new_name: str) -> None:
    """Rename a base branch or topic type."""
    rename_branch_config(ctx, kind, old_name, new_name)


@config_group.command("delete")
@click.argument("kind", type=_KINDS)
@click.argument("name")
@click.pass_obj
def config_delete(ctx: FlowContext, kind: BranchKind, name: str) -> None:
    """Remove a base branch or topic type from the configuration."""
    delete_branch_config(ctx, kind, name)


# ============================================================================
# list
# ============================================================================


def _depth(config: FlowConfig, branch: BranchConfig) -> int:
    depth = 0
    seen = {branch.name}
    parent = config.get(branch.parent) if branch.parent else None
    while parent is not None and parent.name not in seen:
        depth += 1
        seen.add(parent.name)
        parent = config.get(parent.parent) if parent.parent else None
    return depth


def render_config_table(config: FlowConfig) -> Table:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Parent", no_wrap=True)
    table.add_column("Prefix", no_wrap=True)
    table.add_column("Upstream", no_wrap=True)
    table.add_column("Downstream", no_wrap=True)
    table.add_column("Auto-update", no_wrap=True)
    table.add_column("Tag", no_wrap=True)

    for branch in bases_parents_first(config):
        table.add_row(
            "  " * _depth(config, branch) + branch.name,
            "base",
            branch.parent or "-",
            "-",
            branch.upstream_strategy,
            branch.downstream_strategy,
            "yes" if branch.auto_update else "no",
            "-",
        )
    for topic in topic_types(config):
        tag = f"yes ({topic.tag_prefix})" if topic.tag and topic.tag_prefix else "yes"
        table.add_row(
            topic.name,
            "topic",
            topic.parent or "-",
            topic.prefix,
            topic.upstream_strategy,
            topic.downstream_strategy,
            "-",
            tag if topic.tag else "no",
        )
    return table


@config_group.command("list")
@click.pass_obj
def config_list(ctx: FlowContext) -> None:
    """Show the branch hierarchy."""
    config = ctx.load_initialized_config()
    console = Console(stderr=True, width=200)
    console.print(render_config_table(config))
