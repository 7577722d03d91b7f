"""Abstract interface for running repository hook and filter scripts."""

from abc import ABC, abstractmethod
from pathlib import Path

from branchflow.gateway.hooks.types import HookResult


class HookRunner(ABC):
    """Locates and executes hook scripts.

    Only existence and execution live here; naming, environment and the
    pass/fail policy are applied by branchflow.core.hooks.
    """

    @abstractmethod
    def find_script(self, hooks_dir: Path, name: str) -> Path | None:
        """Return the script path if it exists and is executable, else None."""
        ...

    @abstractmethod
    def run_script(
        self,
        script: Path,
        *,
        args: list[str],
        env: dict[str, str],
        cwd: Path,
    ) -> HookResult:
        """Run a script with extra environment variables and capture its output."""
        ...
