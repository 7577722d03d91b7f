"""Click group that maps flow errors to exit codes and discovers topic types."""

import logging

import click

from branchflow.core.context import FlowContext, NoRepoSentinel, create_context
from branchflow.core.topology import topic_types
from branchflow.errors import FlowError, MergeConflictError
from branchflow.output import user_output

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_TYPES = ("feature", "bugfix", "release", "hotfix", "support")


def report_flow_error(error: FlowError) -> None:
    """Print a flow error the way every command reports it."""
    if isinstance(error, MergeConflictError):
        user_output(error.report)
        return
    user_output(click.style("Error: ", fg="red") + str(error))


def _flow_context(ctx: click.Context) -> FlowContext:
    """Context object for dynamic command lookup.

    Commands are resolved before the group callback runs, so the context may
    have to be created here.
    """
    root = ctx.find_root()
    if root.obj is None:
        root.obj = create_context()
    return root.obj


def configured_topic_types(ctx: click.Context) -> list[str]:
    """Topic type names from the repository configuration, in declaration order."""
    flow = _flow_context(ctx)
    if isinstance(flow.repo, NoRepoSentinel):
        return []
    try:
        config = flow.load_config()
    except (FlowError, RuntimeError) as e:
        logger.debug("Could not read topic types: %s", e)
        return []
    return [topic.name for topic in topic_types(config)]


class FlowCommandGroup(click.Group):
    """Top-level group.

    Adds one subgroup per topic type (the defaults plus any configured ones)
    and turns FlowError into its message and exit code.
    """

    def list_commands(self, ctx: click.Context) -> list[str]:
        names = list(super().list_commands(ctx))
        for topic in (*DEFAULT_TOPIC_TYPES, *configured_topic_types(ctx)):
            if topic not in names:
                names.append(topic)
        return names

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command
        if cmd_name in DEFAULT_TOPIC_TYPES or cmd_name in configured_topic_types(ctx):
            # Inline import: topic commands import this module
            from branchflow.cli.commands.topic import make_topic_group

            return make_topic_group(cmd_name)
        return None

    def invoke(self, ctx: click.Context) -> object:
        try:
            return super().invoke(ctx)
        except FlowError as e:
            logger.debug("Command failed", exc_info=True)
            report_flow_error(e)
            raise SystemExit(int(e.exit_code)) from None
