"""Types for hook and filter script execution."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class HookResult:
    """Outcome of running a hook or filter script.

    Attributes:
        exit_code: Process exit status
        stdout: Standard output (the filtered value, for filters)
        stderr: Standard error
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Combined, stripped output for diagnostics."""
        return "\n".join(part.strip() for part in (self.stdout, self.stderr) if part.strip())


@dataclass(frozen=True)
class HookRun:
    """Record of a script invocation, for test assertions."""

    name: str
    args: list[str]
    env: dict[str, str] = field(default_factory=dict)
