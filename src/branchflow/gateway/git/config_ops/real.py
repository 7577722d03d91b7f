"""Real implementation of git configuration operations."""

import subprocess
from pathlib import Path

from branchflow.gateway.git.config_ops.abc import GitConfigOps
from branchflow.gateway.git.config_ops.types import ConfigScope
from branchflow.subprocess_utils import run_subprocess_with_context

# `git config` exits 5 when unsetting a key or section that does not exist
# and 1 when a query finds nothing.
_EXIT_KEY_MISSING = 5
_EXIT_NOT_FOUND = 1


class RealGitConfigOps(GitConfigOps):
    """Real implementation of Git configuration operations using subprocess."""

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def config_set(self, cwd: Path, key: str, value: str, *, scope: ConfigScope) -> None:
        """Set a git configuration value."""
        run_subprocess_with_context(
            cmd=["git", "config", *scope.as_args(), key, value],
            operation_context=f"set git config {key}",
            cwd=cwd,
        )

    def config_unset(self, cwd: Path, key: str, *, scope: ConfigScope) -> None:
        result = subprocess.run(
            ["git", "config", *scope.as_args(), "--unset-all", key],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode not in (0, _EXIT_KEY_MISSING):
            raise RuntimeError(
                f"Failed to unset git config {key}\nstderr: {result.stderr.strip()}"
            )

    def config_remove_section(self, cwd: Path, section: str, *, scope: ConfigScope) -> None:
        result = subprocess.run(
            ["git", "config", *scope.as_args(), "--remove-section", section],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        # "no such section" is reported with exit code 128 on older gits
        if result.returncode != 0 and "no such section" not in result.stderr:
            raise RuntimeError(
                f"Failed to remove git config section {section}\nstderr: {result.stderr.strip()}"
            )

    # ============================================================================
    # Query Operations
    # ============================================================================

    def config_get(self, cwd: Path, key: str) -> str | None:
        result = subprocess.run(
            ["git", "config", "--get", key],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.rstrip("\n")

    def config_get_all(self, cwd: Path, key: str) -> list[str]:
        result = subprocess.run(
            ["git", "config", "--get-all", key],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return []
        return result.stdout.splitlines()

    def config_get_regexp(self, cwd: Path, pattern: str) -> list[tuple[str, str]]:
        result = subprocess.run(
            ["git", "config", "--get-regexp", pattern],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == _EXIT_NOT_FOUND:
            return []
        if result.returncode != 0:
            raise RuntimeError(
                f"Failed to read git config matching {pattern}\nstderr: {result.stderr.strip()}"
            )

        entries: list[tuple[str, str]] = []
        for line in result.stdout.splitlines():
            if not line:
                continue
            key, _, value = line.partition(" ")
            entries.append((key, value))
        return entries
