"""Tests for branch topology lookups and cascade ordering."""

import pytest

from branchflow.core.config_store import preset_config
from branchflow.core.topology import (
    BranchConfig,
    CascadeEntry,
    FlowConfig,
    cascade_set,
    full_name,
    parse_git_bool,
    parse_strategy,
    resolve_merge_target,
    short_name,
    topic_type_for_branch,
    validate_no_cycle,
    validate_parent,
)
from branchflow.errors import (
    BranchNotFoundError,
    CircularDependencyError,
    ConfigurationError,
    InvalidBranchTypeError,
    InvalidMergeStrategyError,
)


def _config(*branches: BranchConfig) -> FlowConfig:
    return FlowConfig(version="1.0", branches=branches)


def _base(name: str, parent: str | None = None, *, auto_update: bool = True) -> BranchConfig:
    return BranchConfig(
        name=name,
        kind="base",
        parent=parent,
        auto_update=auto_update,
        downstream_strategy="merge",
    )


def test_parse_strategy_is_case_insensitive() -> None:
    assert parse_strategy("Rebase") == "rebase"
    assert parse_strategy(" squash ") == "squash"


def test_parse_strategy_rejects_unknown_names() -> None:
    with pytest.raises(InvalidMergeStrategyError, match="valid options"):
        parse_strategy("octopus")


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("YES", True), ("1", True), ("off", False), ("", False), (None, None)],
)
def test_parse_git_bool(value: str | None, expected: bool | None) -> None:
    assert parse_git_bool(value) is expected


def test_cascade_set_classic_release_updates_develop() -> None:
    config = preset_config("classic")

    assert cascade_set(config, "main") == [
        CascadeEntry(branch="develop", parent="main", strategy="merge")
    ]


def test_cascade_set_feature_parent_has_no_children() -> None:
    assert cascade_set(preset_config("classic"), "develop") == []


def test_cascade_set_walks_depth_first_in_declaration_order() -> None:
    config = _config(
        _base("main"),
        _base("staging", "main"),
        _base("develop", "staging"),
        _base("qa", "main"),
    )

    assert [entry.branch for entry in cascade_set(config, "main")] == [
        "staging",
        "develop",
        "qa",
    ]
    assert cascade_set(config, "main")[1].parent == "staging"


def test_cascade_set_skips_branch_without_auto_update_but_visits_descendants() -> None:
    config = _config(
        _base("main"),
        _base("staging", "main", auto_update=False),
        _base("develop", "staging"),
    )

    assert cascade_set(config, "main") == [
        CascadeEntry(branch="develop", parent="staging", strategy="merge")
    ]


def test_resolve_merge_target_uses_topic_parent() -> None:
    assert resolve_merge_target(preset_config("classic"), "release") == "main"


def test_resolve_merge_target_unknown_type() -> None:
    with pytest.raises(InvalidBranchTypeError):
        resolve_merge_target(preset_config("classic"), "experiment")


def test_resolve_merge_target_without_parent() -> None:
    config = _config(BranchConfig(name="spike", kind="topic", prefix="spike/"))

    with pytest.raises(ConfigurationError, match="no parent"):
        resolve_merge_target(config, "spike")


def test_topic_type_for_branch_prefers_longest_prefix() -> None:
    config = _config(
        BranchConfig(name="feature", kind="topic", parent="main", prefix="f/"),
        BranchConfig(name="fix", kind="topic", parent="main", prefix="f/ix/"),
    )

    topic = topic_type_for_branch(config, "f/ix/crash")

    assert topic is not None
    assert topic.name == "fix"
    assert topic_type_for_branch(config, "other/branch") is None


def test_short_and_full_names() -> None:
    topic = preset_config("classic").require_topic_type("feature")

    assert full_name(topic, "login") == "feature/login"
    assert full_name(topic, "feature/login") == "feature/login"
    assert short_name(topic, "feature/login") == "login"
    assert short_name(topic, "login") == "login"


def test_validate_parent_requires_a_base_branch() -> None:
    config = preset_config("classic")

    validate_parent(config, "develop")
    with pytest.raises(BranchNotFoundError):
        validate_parent(config, "feature")


def test_validate_no_cycle() -> None:
    config = preset_config("classic")

    validate_no_cycle(config, "develop", "main")
    with pytest.raises(CircularDependencyError):
        validate_no_cycle(config, "main", "develop")
    with pytest.raises(CircularDependencyError):
        validate_no_cycle(config, "main", "main")


def test_command_options_are_case_insensitive() -> None:
    config = FlowConfig(
        version="1.0",
        command_config={"gitflow.feature.finish.rebase": ["true"]},
    )

    assert config.command_flag("feature", "finish", "rebase") is True
    assert config.command_flag("Feature", "FINISH", "Rebase") is True
    assert config.command_flag("feature", "finish", "squash") is None
