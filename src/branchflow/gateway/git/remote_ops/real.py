"""Production implementation of Git remote operations using subprocess."""

import subprocess
from pathlib import Path

from branchflow.gateway.git.remote_ops.abc import GitRemoteOps
from branchflow.subprocess_utils import run_subprocess_with_context

# Timeout in seconds for network-touching git operations (push, fetch).
# Prevents indefinite hangs on network issues or credential prompts.
_GIT_NETWORK_TIMEOUT = 120


class RealGitRemoteOps(GitRemoteOps):
    """Real implementation of Git remote operations using subprocess."""

    def fetch_branch(self, cwd: Path, remote: str, branch: str) -> None:
        """Fetch a specific branch from a remote."""
        run_subprocess_with_context(
            cmd=["git", "fetch", "--quiet", remote, branch],
            operation_context=f"fetch branch '{branch}' from remote '{remote}'",
            cwd=cwd,
            timeout=_GIT_NETWORK_TIMEOUT,
        )

    def fetch_remote(self, cwd: Path, remote: str) -> None:
        run_subprocess_with_context(
            cmd=["git", "fetch", "--quiet", remote],
            operation_context=f"fetch remote '{remote}'",
            cwd=cwd,
            timeout=_GIT_NETWORK_TIMEOUT,
        )

    def push_branch(
        self,
        cwd: Path,
        remote: str,
        branch: str,
        *,
        set_upstream: bool,
        push_options: list[str],
    ) -> None:
        """Push a branch to a remote."""
        cmd = ["git", "push"]
        if set_upstream:
            cmd.append("-u")
        for option in push_options:
            cmd.extend(["-o", option])
        cmd.extend([remote, branch])
        run_subprocess_with_context(
            cmd=cmd,
            operation_context=f"push branch '{branch}' to remote '{remote}'",
            cwd=cwd,
            timeout=_GIT_NETWORK_TIMEOUT,
        )

    def delete_remote_branch(self, cwd: Path, remote: str, branch: str) -> None:
        run_subprocess_with_context(
            cmd=["git", "push", remote, f":{branch}"],
            operation_context=f"delete branch '{branch}' on remote '{remote}'",
            cwd=cwd,
            timeout=_GIT_NETWORK_TIMEOUT,
        )

    # ============================================================================
    # Query Operations
    # ============================================================================

    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", f"refs/remotes/{remote}/{branch}"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0
