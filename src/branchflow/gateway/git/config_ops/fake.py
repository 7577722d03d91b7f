"""Fake implementation of git configuration operations."""

from __future__ import annotations

import re
from pathlib import Path

from branchflow.gateway.git.config_ops.abc import GitConfigOps
from branchflow.gateway.git.config_ops.types import ConfigScope, normalize_config_key


class FakeGitConfigOps(GitConfigOps):
    """In-memory fake implementation of Git configuration operations.

    All scopes share one key space; the scope of each write is recorded for
    assertions.

    Constructor Injection:
    ---------------------
    - config: Mapping of key -> value, or key -> list of values for
      multi-valued keys. Keys are compared the way git compares them.

    Mutation Tracking:
    -----------------
    - config_settings: (key, value, scope) from config_set()
    - unset_keys: Keys passed to config_unset()
    - removed_sections: Sections passed to config_remove_section()
    """

    def __init__(self, *, config: dict[str, str | list[str]] | None = None) -> None:
        self._values: dict[str, list[str]] = {}
        for key, value in (config or {}).items():
            values = [value] if isinstance(value, str) else list(value)
            self._values[normalize_config_key(key)] = values

        # Mutation tracking
        self._config_settings: list[tuple[str, str, ConfigScope]] = []
        self._unset_keys: list[str] = []
        self._removed_sections: list[str] = []

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def config_set(self, cwd: Path, key: str, value: str, *, scope: ConfigScope) -> None:
        self._values[normalize_config_key(key)] = [value]
        self._config_settings.append((key, value, scope))

    def config_unset(self, cwd: Path, key: str, *, scope: ConfigScope) -> None:
        self._values.pop(normalize_config_key(key), None)
        self._unset_keys.append(key)

    def config_remove_section(self, cwd: Path, section: str, *, scope: ConfigScope) -> None:
        section_parts = section.split(".")
        section_parts[0] = section_parts[0].lower()
        prefix = ".".join(section_parts) + "."
        for key in [k for k in self._values if k.startswith(prefix)]:
            # A nested subsection such as gitflow.branch.a.b.type is not part of
            # section gitflow.branch.a
            if "." not in key[len(prefix) :]:
                del self._values[key]
        self._removed_sections.append(section)

    # ============================================================================
    # Query Operations
    # ============================================================================

    def config_get(self, cwd: Path, key: str) -> str | None:
        values = self._values.get(normalize_config_key(key))
        if not values:
            return None
        return values[-1]

    def config_get_all(self, cwd: Path, key: str) -> list[str]:
        return list(self._values.get(normalize_config_key(key), []))

    def config_get_regexp(self, cwd: Path, pattern: str) -> list[tuple[str, str]]:
        regex = re.compile(pattern)
        return [
            (key, value)
            for key, values in self._values.items()
            if regex.search(key)
            for value in values
        ]

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def config_values(self) -> dict[str, list[str]]:
        """Snapshot of the current config, keyed by normalized key."""
        return {key: list(values) for key, values in self._values.items()}

    @property
    def config_settings(self) -> list[tuple[str, str, ConfigScope]]:
        return self._config_settings.copy()

    @property
    def unset_keys(self) -> list[str]:
        return self._unset_keys.copy()

    @property
    def removed_sections(self) -> list[str]:
        return self._removed_sections.copy()
