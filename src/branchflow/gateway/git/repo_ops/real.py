"""Production implementation of repository-level Git operations."""

import subprocess
from pathlib import Path

from branchflow.gateway.git.repo_ops.abc import GitRepoOps
from branchflow.subprocess_utils import run_subprocess_with_context


class RealGitRepoOps(GitRepoOps):
    """Real implementation of repository operations using subprocess."""

    def create_initial_commit(self, cwd: Path, message: str) -> None:
        run_subprocess_with_context(
            cmd=["git", "commit", "--allow-empty", "--no-verify", "-m", message],
            operation_context="create initial commit",
            cwd=cwd,
        )

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_repository_root(self, cwd: Path) -> Path | None:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def get_git_dir(self, cwd: Path) -> Path:
        result = run_subprocess_with_context(
            cmd=["git", "rev-parse", "--absolute-git-dir"],
            operation_context="locate git directory",
            cwd=cwd,
        )
        return Path(result.stdout.strip())

    def get_git_common_dir(self, cwd: Path) -> Path:
        result = run_subprocess_with_context(
            cmd=["git", "rev-parse", "--git-common-dir"],
            operation_context="locate git common directory",
            cwd=cwd,
        )
        common_dir = Path(result.stdout.strip())
        if not common_dir.is_absolute():
            common_dir = cwd / common_dir
        return common_dir.resolve()

    def has_commits(self, cwd: Path) -> bool:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0
