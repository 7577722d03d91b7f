import logging

import click

from branchflow.cli.commands.config import config_group
from branchflow.cli.commands.init import init_cmd
from branchflow.cli.commands.overview import overview_cmd
from branchflow.cli.commands.status import status_cmd
from branchflow.cli.commands.update import update_cmd
from branchflow.cli.group import FlowCommandGroup
from branchflow.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(cls=FlowCommandGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="branchflow")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Git-flow branching: start, publish, update and finish topic branches."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(config_group)
cli.add_command(init_cmd)
cli.add_command(overview_cmd)
cli.add_command(status_cmd)
cli.add_command(update_cmd)


def main() -> None:
    """CLI entry point used by the `branchflow` console script."""
    cli()
