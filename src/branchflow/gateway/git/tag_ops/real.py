"""Production implementation of Git tag operations using subprocess."""

import subprocess
from pathlib import Path

from branchflow.gateway.git.tag_ops.abc import GitTagOps
from branchflow.subprocess_utils import run_subprocess_with_context


class RealGitTagOps(GitTagOps):
    """Production implementation of tag operations using subprocess."""

    def create_tag(
        self,
        cwd: Path,
        tag_name: str,
        *,
        ref: str,
        message: str,
        message_file: Path | None,
        sign: bool,
        signing_key: str | None,
    ) -> None:
        cmd = ["git", "tag", "-a"]
        if signing_key:
            cmd.extend(["-u", signing_key])
        elif sign:
            cmd.append("-s")
        if message_file is not None:
            cmd.extend(["-F", str(message_file)])
        else:
            cmd.extend(["-m", message])
        cmd.extend([tag_name, ref])
        run_subprocess_with_context(
            cmd=cmd,
            operation_context=f"create tag '{tag_name}'",
            cwd=cwd,
        )

    def tag_exists(self, cwd: Path, tag_name: str) -> bool:
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", f"refs/tags/{tag_name}"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0
