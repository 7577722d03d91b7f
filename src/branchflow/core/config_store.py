"""Load and save the flow configuration in git config.

Layout:

    gitflow.version                       initialization marker
    gitflow.origin                        remote name
    gitflow.branch.<name>.type            base | topic
    gitflow.branch.<name>.parent
    gitflow.branch.<name>.prefix
    gitflow.branch.<name>.upstreamStrategy
    gitflow.branch.<name>.downstreamStrategy
    gitflow.branch.<name>.autoUpdate
    gitflow.branch.<name>.tag
    gitflow.branch.<name>.tagPrefix
    gitflow.branch.<name>.startPoint
    gitflow.branch.<full-branch>.base     stored base of an active topic branch
    gitflow.<type>.<command>.<option>     per-command defaults

Key names are matched case-insensitively.
"""

import logging
import re
from dataclasses import replace
from pathlib import Path

from branchflow.core.topology import (
    BranchConfig,
    FlowConfig,
    parse_git_bool,
    parse_strategy,
)
from branchflow.gateway.git.abc import Git
from branchflow.gateway.git.config_ops.types import LOCAL_SCOPE, ConfigScope

logger = logging.getLogger(__name__)

CONFIG_VERSION = "1.0"
DEFAULT_REMOTE = "origin"

_BRANCH_KEY = re.compile(r"^gitflow\.branch\.(?P<name>.+)\.(?P<field>[^.]+)$", re.IGNORECASE)
_COMMAND_KEY = re.compile(r"^gitflow\.(?P<type>[^.]+)\.(?P<command>[^.]+)\.(?P<option>[^.]+)$")
_RESERVED_SECTIONS = frozenset({"branch", "path"})


def load_flow_config(git: Git, cwd: Path) -> FlowConfig:
    """Read the configuration snapshot from git config."""
    version: str | None = None
    remote = DEFAULT_REMOTE
    fields_by_branch: dict[str, dict[str, str]] = {}
    command_config: dict[str, list[str]] = {}

    for key, value in git.config.config_get_regexp(cwd, r"^gitflow\."):
        lowered = key.lower()
        if lowered == "gitflow.version":
            version = value
            continue
        if lowered == "gitflow.origin":
            remote = value or DEFAULT_REMOTE
            continue

        branch_match = _BRANCH_KEY.match(key)
        if branch_match is not None:
            fields = fields_by_branch.setdefault(branch_match.group("name"), {})
            fields[branch_match.group("field").lower()] = value
            continue

        command_match = _COMMAND_KEY.match(lowered)
        if command_match is not None and command_match.group("type") not in _RESERVED_SECTIONS:
            command_config.setdefault(lowered, []).append(value)

    branches = tuple(
        _branch_from_fields(name, fields)
        for name, fields in fields_by_branch.items()
        if fields.get("type", "").lower() in ("base", "topic")
    )
    logger.debug("Loaded flow config: version=%s, %d branch configs", version, len(branches))
    return FlowConfig(
        version=version,
        remote=remote,
        branches=branches,
        command_config=command_config,
    )


def _branch_from_fields(name: str, fields: dict[str, str]) -> BranchConfig:
    kind = "base" if fields["type"].lower() == "base" else "topic"
    default_strategy = "none" if kind == "base" and not fields.get("parent") else "merge"
    return BranchConfig(
        name=name,
        kind=kind,
        parent=fields.get("parent") or None,
        prefix=fields.get("prefix", ""),
        upstream_strategy=parse_strategy(fields.get("upstreamstrategy", default_strategy)),
        downstream_strategy=parse_strategy(fields.get("downstreamstrategy", default_strategy)),
        auto_update=parse_git_bool(fields.get("autoupdate")) or False,
        tag=parse_git_bool(fields.get("tag")) or False,
        tag_prefix=fields.get("tagprefix", ""),
        start_point=fields.get("startpoint") or None,
    )


# ============================================================================
# Writes
# ============================================================================


def save_branch_config(
    git: Git, cwd: Path, branch: BranchConfig, *, scope: ConfigScope = LOCAL_SCOPE
) -> None:
    """Write one branch config, replacing any previous definition."""
    section = f"gitflow.branch.{branch.name}"
    git.config.config_remove_section(cwd, section, scope=scope)

    git.config.config_set(cwd, f"{section}.type", branch.kind, scope=scope)
    if branch.parent:
        git.config.config_set(cwd, f"{section}.parent", branch.parent, scope=scope)
    if branch.is_topic:
        git.config.config_set(cwd, f"{section}.prefix", branch.prefix, scope=scope)
    git.config.config_set(
        cwd, f"{section}.upstreamStrategy", branch.upstream_strategy, scope=scope
    )
    git.config.config_set(
        cwd, f"{section}.downstreamStrategy", branch.downstream_strategy, scope=scope
    )
    if branch.is_base and branch.parent:
        git.config.config_set(
            cwd, f"{section}.autoUpdate", _git_bool(branch.auto_update), scope=scope
        )
    if branch.is_topic:
        git.config.config_set(cwd, f"{section}.tag", _git_bool(branch.tag), scope=scope)
    if branch.tag_prefix:
        git.config.config_set(cwd, f"{section}.tagPrefix", branch.tag_prefix, scope=scope)
    if branch.start_point:
        git.config.config_set(cwd, f"{section}.startPoint", branch.start_point, scope=scope)
    logger.debug("Saved branch config for %s", branch.name)


def remove_branch_config(
    git: Git, cwd: Path, name: str, *, scope: ConfigScope = LOCAL_SCOPE
) -> None:
    git.config.config_remove_section(cwd, f"gitflow.branch.{name}", scope=scope)


def save_flow_config(
    git: Git, cwd: Path, config: FlowConfig, *, scope: ConfigScope = LOCAL_SCOPE
) -> None:
    """Write every branch config plus the remote and initialization marker."""
    git.config.config_set(cwd, "gitflow.origin", config.remote, scope=scope)
    for branch in config.branches:
        save_branch_config(git, cwd, branch, scope=scope)
    git.config.config_set(cwd, "gitflow.version", config.version or CONFIG_VERSION, scope=scope)


def _git_bool(value: bool) -> str:
    return "true" if value else "false"


# ============================================================================
# Stored base of active topic branches
# ============================================================================


def get_stored_base(git: Git, cwd: Path, branch: str) -> str | None:
    return git.config.config_get(cwd, f"gitflow.branch.{branch}.base")


def set_stored_base(git: Git, cwd: Path, branch: str, base: str) -> None:
    git.config.config_set(cwd, f"gitflow.branch.{branch}.base", base, scope=LOCAL_SCOPE)


def unset_stored_base(git: Git, cwd: Path, branch: str) -> None:
    git.config.config_unset(cwd, f"gitflow.branch.{branch}.base", scope=LOCAL_SCOPE)


# ============================================================================
# Presets
# ============================================================================

PRESETS: tuple[str, ...] = ("classic", "github", "gitlab")


def preset_config(preset: str) -> FlowConfig:
    """Default topology for a named preset.

    Raises:
        ValueError: If the preset name is unknown
    """
    if preset == "classic":
        branches = (
            BranchConfig(
                name="main",
                kind="base",
                upstream_strategy="none",
                downstream_strategy="none",
            ),
            BranchConfig(
                name="develop",
                kind="base",
                parent="main",
                auto_update=True,
                upstream_strategy="merge",
                downstream_strategy="merge",
            ),
            _topic("feature", parent="develop", downstream="rebase"),
            _topic("bugfix", parent="develop", downstream="rebase"),
            _topic("release", parent="main", start_point="develop", tag=True),
            _topic("hotfix", parent="main", tag=True),
            _topic("support", parent="main", upstream="none", downstream="none"),
        )
    elif preset == "github":
        branches = (
            BranchConfig(
                name="main",
                kind="base",
                upstream_strategy="none",
                downstream_strategy="none",
            ),
            _topic("feature", parent="main", downstream="rebase"),
        )
    elif preset == "gitlab":
        branches = (
            BranchConfig(
                name="production",
                kind="base",
                upstream_strategy="none",
                downstream_strategy="none",
            ),
            BranchConfig(name="staging", kind="base", parent="production", auto_update=True),
            BranchConfig(name="main", kind="base", parent="staging", auto_update=True),
            _topic("feature", parent="main", downstream="rebase"),
            _topic("hotfix", parent="production", start_point="production", tag=True),
        )
    else:
        raise ValueError(f"Unknown preset: {preset}")

    return FlowConfig(version=CONFIG_VERSION, remote=DEFAULT_REMOTE, branches=branches)


def _topic(
    name: str,
    *,
    parent: str,
    upstream: str = "merge",
    downstream: str = "merge",
    start_point: str | None = None,
    tag: bool = False,
) -> BranchConfig:
    return BranchConfig(
        name=name,
        kind="topic",
        parent=parent,
        prefix=f"{name}/",
        upstream_strategy=parse_strategy(upstream),
        downstream_strategy=parse_strategy(downstream),
        start_point=start_point,
        tag=tag,
    )


def apply_overrides(
    config: FlowConfig,
    *,
    main_branch: str | None = None,
    develop_branch: str | None = None,
    prefixes: dict[str, str] | None = None,
    tag_prefix: str | None = None,
) -> FlowConfig:
    """Rename the trunk branches, change topic prefixes and set the tag prefix.

    Renaming a base branch repoints every parent and start point that named it.
    """
    renames: dict[str, str] = {}
    if main_branch and config.get("main") is not None:
        renames["main"] = main_branch
    if develop_branch and config.get("develop") is not None:
        renames["develop"] = develop_branch

    updated: list[BranchConfig] = []
    for branch in config.branches:
        changed = branch
        if branch.name in renames:
            changed = replace(changed, name=renames[branch.name])
        if changed.parent in renames:
            changed = replace(changed, parent=renames[changed.parent])
        if changed.start_point in renames:
            changed = replace(changed, start_point=renames[changed.start_point])
        if branch.is_topic and prefixes and prefixes.get(branch.name):
            changed = replace(changed, prefix=prefixes[branch.name])
        if branch.is_topic and branch.tag and tag_prefix is not None:
            changed = replace(changed, tag_prefix=tag_prefix)
        updated.append(changed)

    return replace(config, branches=tuple(updated))
