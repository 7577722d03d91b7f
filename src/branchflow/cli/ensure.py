"""CLI error handling utilities with styled output.

Ensure asserts invariants of command-line arguments; every failure prints a
red "Error:" line and exits with status 1.
"""

from typing import TypeVar

import click

from branchflow.output import user_output

T = TypeVar("T")


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Returns:
            The value unchanged if not None (with narrowed type T)

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)
        return value

    @staticmethod
    def at_most_one(flags: dict[str, bool], error_message: str) -> None:
        """Ensure no more than one of the named flags is set."""
        if sum(1 for enabled in flags.values() if enabled) > 1:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)
