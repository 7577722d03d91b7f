"""Output helpers for CLI commands with clear intent.

user_output: diagnostics and progress meant for a human, written to stderr.
machine_output: data meant to be consumed by scripts, written to stdout.
"""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", *, nl: bool = True) -> None:
    """Write script-consumable output to stdout."""
    click.echo(message, nl=nl)
