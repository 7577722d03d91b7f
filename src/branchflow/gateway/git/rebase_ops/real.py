"""Production implementation of Git rebase operations using subprocess."""

import subprocess
from pathlib import Path

from branchflow.gateway.git.abc import GitCommandResult
from branchflow.gateway.git.rebase_ops.abc import GitRebaseOps
from branchflow.subprocess_utils import run_git_combined, run_subprocess_with_context


class RealGitRebaseOps(GitRebaseOps):
    """Real implementation of Git rebase operations using subprocess."""

    def rebase(self, cwd: Path, upstream: str, *, rebase_merges: bool) -> GitCommandResult:
        cmd = ["git", "rebase"]
        if rebase_merges:
            cmd.append("--rebase-merges")
        cmd.append(upstream)
        result = run_git_combined(cmd, cwd)
        return GitCommandResult(returncode=result.returncode, output=result.stdout or "")

    def rebase_continue(self, cwd: Path) -> GitCommandResult:
        result = run_git_combined(["git", "rebase", "--continue"], cwd)
        return GitCommandResult(returncode=result.returncode, output=result.stdout or "")

    def rebase_abort(self, cwd: Path) -> None:
        run_subprocess_with_context(
            cmd=["git", "rebase", "--abort"],
            operation_context="abort rebase",
            cwd=cwd,
        )

    def is_rebase_in_progress(self, cwd: Path) -> bool:
        for state_dir in ("rebase-merge", "rebase-apply"):
            result = subprocess.run(
                ["git", "rev-parse", "--git-path", state_dir],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
            if result.returncode != 0:
                return False
            if (cwd / result.stdout.strip()).exists():
                return True
        return False
