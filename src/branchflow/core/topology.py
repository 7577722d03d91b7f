"""Branch topology: the configured tree of base branches and topic types.

A FlowConfig is an immutable snapshot loaded once per command. Base branches
form a tree through their `parent` links; topic types hang off a base branch
and describe short-lived branches identified by a name prefix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, NamedTuple, cast, get_args

from branchflow.errors import (
    BranchNotFoundError,
    CircularDependencyError,
    ConfigurationError,
    InvalidBranchTypeError,
    InvalidMergeStrategyError,
)

BranchKind = Literal["base", "topic"]
MergeStrategy = Literal["merge", "rebase", "squash", "none"]

MERGE_STRATEGIES: tuple[str, ...] = get_args(MergeStrategy)

_TRUE_VALUES = frozenset({"true", "yes", "on", "1"})
_FALSE_VALUES = frozenset({"false", "no", "off", "0", ""})


def parse_strategy(value: str) -> MergeStrategy:
    """Validate a merge strategy name (case-insensitive)."""
    normalized = value.strip().lower()
    if normalized not in MERGE_STRATEGIES:
        raise InvalidMergeStrategyError(value)
    return cast(MergeStrategy, normalized)


def parse_git_bool(value: str | None) -> bool | None:
    """Interpret a git config boolean, returning None for unset or unrecognized values."""
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


@dataclass(frozen=True)
class BranchConfig:
    """Configuration of one base branch or topic type.

    For a base branch `name` is the git branch name. For a topic type `name`
    is the type ("feature") and concrete branches are `prefix + short name`.
    """

    name: str
    kind: BranchKind
    parent: str | None = None
    prefix: str = ""
    upstream_strategy: MergeStrategy = "merge"
    downstream_strategy: MergeStrategy = "merge"
    auto_update: bool = False
    tag: bool = False
    tag_prefix: str = ""
    start_point: str | None = None

    @property
    def is_base(self) -> bool:
        return self.kind == "base"

    @property
    def is_topic(self) -> bool:
        return self.kind == "topic"


@dataclass(frozen=True)
class FlowConfig:
    """Immutable snapshot of the whole flow configuration.

    Attributes:
        version: Initialization marker; None when the repository is not initialized
        remote: Remote name used for fetch, publish and cleanup
        branches: Branch configs in declaration order
        command_config: Raw `gitflow.<type>.<command>.<option>` values, keyed
            by the lower-cased key, each with all of its values
    """

    version: str | None
    remote: str = "origin"
    branches: tuple[BranchConfig, ...] = ()
    command_config: dict[str, list[str]] = field(default_factory=dict)

    @property
    def initialized(self) -> bool:
        return self.version is not None

    def get(self, name: str) -> BranchConfig | None:
        for branch in self.branches:
            if branch.name == name:
                return branch
        return None

    def require_topic_type(self, branch_type: str) -> BranchConfig:
        branch = self.get(branch_type)
        if branch is None or not branch.is_topic:
            raise InvalidBranchTypeError(branch_type)
        return branch

    def command_option(self, branch_type: str, command: str, option: str) -> str | None:
        """Last value of `gitflow.<type>.<command>.<option>`, or None."""
        values = self.command_option_all(branch_type, command, option)
        return values[-1] if values else None

    def command_option_all(self, branch_type: str, command: str, option: str) -> list[str]:
        key = f"gitflow.{branch_type}.{command}.{option}".lower()
        return list(self.command_config.get(key, []))

    def command_flag(self, branch_type: str, command: str, option: str) -> bool | None:
        return parse_git_bool(self.command_option(branch_type, command, option))


class CascadeEntry(NamedTuple):
    """A base branch to bring up to date after its parent changed.

    Attributes:
        branch: Base branch to update
        parent: Branch it is updated from (its own configured parent)
        strategy: Its downstream strategy
    """

    branch: str
    parent: str
    strategy: MergeStrategy


# ============================================================================
# Lookups
# ============================================================================


def base_branches(config: FlowConfig) -> list[BranchConfig]:
    return [branch for branch in config.branches if branch.is_base]


def topic_types(config: FlowConfig) -> list[BranchConfig]:
    return [branch for branch in config.branches if branch.is_topic]


def root_branches(config: FlowConfig) -> list[BranchConfig]:
    return [branch for branch in config.branches if branch.is_base and not branch.parent]


def children_of(config: FlowConfig, name: str) -> list[BranchConfig]:
    """Base branches whose parent is `name`, in declaration order."""
    return [branch for branch in config.branches if branch.is_base and branch.parent == name]


def dependents_of(config: FlowConfig, name: str) -> list[BranchConfig]:
    """Every base branch or topic type whose parent is `name`."""
    return [branch for branch in config.branches if branch.parent == name]


def topic_type_for_branch(config: FlowConfig, branch_name: str) -> BranchConfig | None:
    """Find the topic type whose prefix matches a full branch name.

    When several prefixes match, the longest one wins.
    """
    matches = [
        branch
        for branch in topic_types(config)
        if branch.prefix and branch_name.startswith(branch.prefix)
    ]
    if not matches:
        return None
    return max(matches, key=lambda branch: len(branch.prefix))


def short_name(topic_type: BranchConfig, full_name: str) -> str:
    """Strip the topic type's prefix from a full branch name."""
    if topic_type.prefix and full_name.startswith(topic_type.prefix):
        return full_name[len(topic_type.prefix) :]
    return full_name


def full_name(topic_type: BranchConfig, name: str) -> str:
    """Apply the topic type's prefix unless the name already carries it."""
    if topic_type.prefix and not name.startswith(topic_type.prefix):
        return topic_type.prefix + name
    return name


# ============================================================================
# Resolution
# ============================================================================


def resolve_merge_target(config: FlowConfig, topic_type: str) -> str:
    """Branch a finished topic branch is merged into.

    The topic type's currently configured parent is authoritative; the base
    recorded on the branch at start time is deliberately not consulted.
    """
    topic = config.require_topic_type(topic_type)
    if not topic.parent:
        raise ConfigurationError(f"topic type '{topic_type}' has no parent configured")
    return topic.parent


def cascade_set(config: FlowConfig, from_base: str) -> list[CascadeEntry]:
    """Auto-updating base branches below `from_base`, in update order.

    Pre-order depth-first walk, siblings in declaration order. A branch with
    auto_update off is skipped but its descendants are still visited and
    judged by their own flag.
    """
    entries: list[CascadeEntry] = []
    visited = {from_base}

    def visit(name: str) -> None:
        for child in children_of(config, name):
            if child.name in visited:
                continue
            visited.add(child.name)
            if child.auto_update:
                entries.append(
                    CascadeEntry(branch=child.name, parent=name, strategy=child.downstream_strategy)
                )
            visit(child.name)

    visit(from_base)
    return entries


# ============================================================================
# Validation
# ============================================================================


def validate_parent(config: FlowConfig, parent: str) -> None:
    """Ensure `parent` names a configured base branch."""
    branch = config.get(parent)
    if branch is None or not branch.is_base:
        raise BranchNotFoundError(parent)


def validate_no_cycle(config: FlowConfig, name: str, parent: str) -> None:
    """Ensure making `parent` the parent of `name` keeps the base branches a tree."""
    if parent == name:
        raise CircularDependencyError(name, parent)

    seen: set[str] = set()
    current: str | None = parent
    while current is not None and current not in seen:
        if current == name:
            raise CircularDependencyError(name, parent)
        seen.add(current)
        branch = config.get(current)
        current = branch.parent if branch is not None else None
