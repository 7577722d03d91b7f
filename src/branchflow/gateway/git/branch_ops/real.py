"""Production implementation of Git branch operations using subprocess."""

import subprocess
from pathlib import Path

from branchflow.gateway.git.branch_ops.abc import GitBranchOps
from branchflow.subprocess_utils import run_subprocess_with_context


class RealGitBranchOps(GitBranchOps):
    """Production implementation of branch operations using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        """Create a new branch without checking it out."""
        run_subprocess_with_context(
            cmd=["git", "branch", branch_name, start_point],
            operation_context=f"create branch '{branch_name}' from '{start_point}'",
            cwd=cwd,
        )

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Checkout a branch in the given directory."""
        run_subprocess_with_context(
            cmd=["git", "checkout", branch],
            operation_context=f"checkout branch '{branch}'",
            cwd=cwd,
        )

    def delete_branch(self, cwd: Path, branch_name: str, *, force: bool) -> None:
        """Delete a local branch.

        Idempotent: if branch doesn't exist, returns successfully.
        """
        if not self.branch_exists(cwd, branch_name):
            return

        flag = "-D" if force else "-d"
        run_subprocess_with_context(
            cmd=["git", "branch", flag, branch_name],
            operation_context=f"delete branch '{branch_name}'",
            cwd=cwd,
        )

    def rename_branch(self, cwd: Path, old_name: str, new_name: str) -> None:
        run_subprocess_with_context(
            cmd=["git", "branch", "-m", old_name, new_name],
            operation_context=f"rename branch '{old_name}' to '{new_name}'",
            cwd=cwd,
        )

    def create_tracking_branch(self, cwd: Path, branch: str, remote_ref: str) -> None:
        """Create and checkout a local tracking branch from a remote branch."""
        run_subprocess_with_context(
            cmd=["git", "checkout", "-b", branch, "--track", remote_ref],
            operation_context=f"create tracking branch '{branch}' from '{remote_ref}'",
            cwd=cwd,
        )

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch.

        Uses symbolic-ref so that an unborn branch in an empty repository
        still reports its name.
        """
        result = subprocess.run(
            ["git", "symbolic-ref", "--quiet", "--short", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def branch_exists(self, cwd: Path, branch: str) -> bool:
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0

    def list_local_branches(self, cwd: Path) -> list[str]:
        """List all local branch names in the repository."""
        result = run_subprocess_with_context(
            cmd=["git", "branch", "--format=%(refname:short)"],
            operation_context="list local branches",
            cwd=cwd,
        )
        return [line.strip() for line in result.stdout.strip().split("\n") if line.strip()]

    def get_upstream_branch(self, cwd: Path, branch: str) -> str | None:
        """Get the upstream tracking ref of a branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        upstream = result.stdout.strip()
        return upstream or None

    def count_left_right(self, cwd: Path, left: str, right: str) -> tuple[int, int]:
        result = run_subprocess_with_context(
            cmd=["git", "rev-list", "--left-right", "--count", f"{left}...{right}"],
            operation_context=f"compare '{left}' with '{right}'",
            cwd=cwd,
        )
        parts = result.stdout.split()
        if len(parts) != 2:
            raise RuntimeError(f"Unexpected rev-list output: {result.stdout.strip()!r}")
        return int(parts[0]), int(parts[1])

    def get_branch_head(self, cwd: Path, branch: str) -> str | None:
        """Get the commit SHA at the head of a branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        return result.stdout.strip()

    def is_ancestor(self, cwd: Path, ancestor: str, descendant: str) -> bool:
        result = subprocess.run(
            ["git", "merge-base", "--is-ancestor", ancestor, descendant],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode not in (0, 1):
            raise RuntimeError(
                f"Failed to compare '{ancestor}' with '{descendant}': {result.stderr.strip()}"
            )
        return result.returncode == 0
