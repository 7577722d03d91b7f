"""Types for git config operations."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConfigScope:
    """Which git config file a write goes to.

    Attributes:
        level: "local", "global", "system" or "file"
        file: Config file path, required when level is "file"
    """

    level: str = "local"
    file: Path | None = None

    def as_args(self) -> list[str]:
        if self.level == "file":
            if self.file is None:
                raise ValueError("ConfigScope(level='file') requires a file path")
            return ["--file", str(self.file)]
        return [f"--{self.level}"]


LOCAL_SCOPE = ConfigScope()


def normalize_config_key(key: str) -> str:
    """Lower-case the section and variable name, keeping the subsection as is.

    This mirrors how git itself compares keys: `gitflow.branch.Foo.Type` and
    `GITFLOW.branch.Foo.type` are the same key, `gitflow.branch.foo.type` is not.
    """
    parts = key.split(".")
    if len(parts) < 2:
        return key.lower()
    parts[0] = parts[0].lower()
    parts[-1] = parts[-1].lower()
    return ".".join(parts)
