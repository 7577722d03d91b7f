"""Production hook runner using subprocess."""

import logging
import os
import subprocess
from pathlib import Path

from branchflow.gateway.hooks.abc import HookRunner
from branchflow.gateway.hooks.types import HookResult

logger = logging.getLogger(__name__)


class RealHookRunner(HookRunner):
    """Runs hook scripts found on disk."""

    def find_script(self, hooks_dir: Path, name: str) -> Path | None:
        script = hooks_dir / name
        if not script.is_file():
            return None
        if not os.access(script, os.X_OK):
            logger.debug("Skipping non-executable hook %s", script)
            return None
        return script

    def run_script(
        self,
        script: Path,
        *,
        args: list[str],
        env: dict[str, str],
        cwd: Path,
    ) -> HookResult:
        logger.debug("Running hook %s %s", script, " ".join(args))
        result = subprocess.run(
            [str(script), *args],
            cwd=cwd,
            env={**os.environ, **env},
            capture_output=True,
            text=True,
            check=False,
        )
        return HookResult(exit_code=result.returncode, stdout=result.stdout, stderr=result.stderr)
