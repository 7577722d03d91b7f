"""Tests for initializing the flow configuration."""

from pathlib import Path

import pytest

from branchflow.core.config_store import apply_overrides, load_flow_config, preset_config
from branchflow.core.init_flow import INITIAL_COMMIT_MESSAGE, bases_parents_first, init_flow
from branchflow.errors import AlreadyInitializedError
from branchflow.gateway.git.config_ops.types import LOCAL_SCOPE, ConfigScope
from tests.test_utils.flow_helpers import build_flow_context


def test_bases_parents_first_for_gitlab() -> None:
    names = [branch.name for branch in bases_parents_first(preset_config("gitlab"))]

    assert names == ["production", "staging", "main"]


def test_init_in_empty_repository(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="main", local_branches=["main"], config={}, has_commits=False
    )

    created = init_flow(ctx, preset_config("classic"), scope=LOCAL_SCOPE)

    assert created == ["develop"]
    assert git.repo.initial_commits == [INITIAL_COMMIT_MESSAGE]
    assert git.created_branches == [("develop", "main")]
    config = load_flow_config(git, tmp_path)
    assert config.initialized
    assert config.require_topic_type("release").start_point == "develop"


def test_init_twice_requires_force(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    with pytest.raises(AlreadyInitializedError):
        init_flow(ctx, preset_config("classic"), scope=LOCAL_SCOPE)


def test_force_reinit_drops_removed_branch_types(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(tmp_path)

    init_flow(ctx, preset_config("github"), scope=LOCAL_SCOPE, force=True)

    config = load_flow_config(git, tmp_path)
    assert [branch.name for branch in config.branches] == ["main", "feature"]
    assert config.require_topic_type("feature").parent == "main"


def test_init_with_overrides_and_scope(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="trunk", local_branches=["trunk"], config={}
    )
    scope = ConfigScope(level="global")
    config = apply_overrides(
        preset_config("classic"),
        main_branch="trunk",
        develop_branch="dev",
        prefixes={"feature": "feat/"},
        tag_prefix="v",
    )

    init_flow(ctx, config, scope=scope, create_branches=True)

    loaded = load_flow_config(git, tmp_path)
    assert loaded.require_topic_type("feature").prefix == "feat/"
    assert loaded.require_topic_type("feature").parent == "dev"
    assert loaded.require_topic_type("release").tag_prefix == "v"
    assert git.created_branches == [("dev", "trunk")]
    assert {setting[2] for setting in git.config_settings} == {scope}


def test_init_without_creating_branches(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="main", local_branches=["main"], config={}
    )

    assert init_flow(ctx, preset_config("classic"), scope=LOCAL_SCOPE, create_branches=False) == []
    assert git.created_branches == []
