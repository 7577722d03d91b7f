"""branchflow CLI entry point.

This package provides a Click-based CLI for git-flow style branching: topic
branches are started from and finished back into a configurable tree of base
branches. See `branchflow --help` for details.
"""

from branchflow.cli.cli import cli, main

__all__ = ["cli", "main"]
