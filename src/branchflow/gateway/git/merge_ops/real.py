"""Production implementation of Git merge operations using subprocess."""

import subprocess
from pathlib import Path

from branchflow.gateway.git.abc import GitCommandResult
from branchflow.gateway.git.merge_ops.abc import GitMergeOps
from branchflow.subprocess_utils import run_git_combined, run_subprocess_with_context


class RealGitMergeOps(GitMergeOps):
    """Real implementation of Git merge operations using subprocess."""

    def merge(
        self,
        cwd: Path,
        source: str,
        *,
        no_ff: bool,
        squash: bool,
        no_verify: bool,
        message: str | None,
    ) -> GitCommandResult:
        cmd = ["git", "merge"]
        if squash:
            cmd.append("--squash")
        elif no_ff:
            cmd.append("--no-ff")
        if no_verify:
            cmd.append("--no-verify")
        if message is not None and not squash:
            cmd.extend(["-m", message])
        cmd.append(source)

        result = run_git_combined(cmd, cwd)
        return GitCommandResult(returncode=result.returncode, output=result.stdout or "")

    def merge_abort(self, cwd: Path) -> None:
        """Abort an in-progress merge.

        A conflicted `merge --squash` leaves no MERGE_HEAD, so `git merge --abort`
        refuses it; `git reset --merge` restores the same pre-merge state.
        """
        if self.is_merge_in_progress(cwd):
            cmd = ["git", "merge", "--abort"]
        else:
            cmd = ["git", "reset", "--merge"]
        run_subprocess_with_context(
            cmd=cmd,
            operation_context="abort merge",
            cwd=cwd,
        )

    def commit(self, cwd: Path, message: str, *, no_verify: bool) -> GitCommandResult:
        cmd = ["git", "commit", "-m", message]
        if no_verify:
            cmd.append("--no-verify")
        result = run_git_combined(cmd, cwd)
        return GitCommandResult(returncode=result.returncode, output=result.stdout or "")

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_unmerged_files(self, cwd: Path) -> list[str]:
        """List paths with unmerged index entries.

        Each conflicted path appears once per stage; duplicates are collapsed
        while preserving order.
        """
        result = run_subprocess_with_context(
            cmd=["git", "ls-files", "--unmerged"],
            operation_context="list unmerged files",
            cwd=cwd,
        )
        files: list[str] = []
        for line in result.stdout.splitlines():
            if "\t" not in line:
                continue
            path = line.split("\t", 1)[1]
            if path not in files:
                files.append(path)
        return files

    def is_merge_in_progress(self, cwd: Path) -> bool:
        result = subprocess.run(
            ["git", "rev-parse", "-q", "--verify", "MERGE_HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0

    def has_staged_changes(self, cwd: Path) -> bool:
        result = subprocess.run(
            ["git", "diff", "--cached", "--quiet"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 1
