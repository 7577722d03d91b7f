"""Fake hook runner for testing."""

from __future__ import annotations

from pathlib import Path

from branchflow.gateway.hooks.abc import HookRunner
from branchflow.gateway.hooks.types import HookResult, HookRun


class FakeHookRunner(HookRunner):
    """In-memory hook runner.

    Constructor Injection:
    ---------------------
    - scripts: Mapping of script name -> result it produces when run. Names
      not in the mapping behave as absent scripts.

    Mutation Tracking:
    -----------------
    - runs: HookRun for every script executed, in order
    """

    def __init__(self, *, scripts: dict[str, HookResult] | None = None) -> None:
        self._scripts = scripts if scripts is not None else {}
        self._runs: list[HookRun] = []

    def find_script(self, hooks_dir: Path, name: str) -> Path | None:
        if name not in self._scripts:
            return None
        return hooks_dir / name

    def run_script(
        self,
        script: Path,
        *,
        args: list[str],
        env: dict[str, str],
        cwd: Path,
    ) -> HookResult:
        self._runs.append(HookRun(name=script.name, args=list(args), env=dict(env)))
        return self._scripts[script.name]

    @property
    def runs(self) -> list[HookRun]:
        return self._runs.copy()

    @property
    def run_names(self) -> list[str]:
        return [run.name for run in self._runs]
