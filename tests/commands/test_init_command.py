"""Tests for `branchflow init`."""

from pathlib import Path

from click.testing import CliRunner

from branchflow.cli.cli import cli
from branchflow.core.config_store import load_flow_config
from branchflow.errors import ExitCode
from branchflow.gateway.git.config_ops.types import ConfigScope
from tests.test_utils.flow_helpers import build_flow_context


def test_init_classic_defaults(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="main", local_branches=["main"], config={}
    )

    result = CliRunner().invoke(cli, ["init", "--defaults"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Initialized git-flow in this repository" in result.output
    assert "Base branches: main, develop" in result.output
    assert "feature (feature/)" in result.output
    assert git.created_branches == [("develop", "main")]


def test_init_preset_with_overrides(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="trunk", local_branches=["trunk"], config={}
    )

    result = CliRunner().invoke(
        cli,
        ["init", "--preset", "github", "--main", "trunk", "--feature", "feat/"],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    config = load_flow_config(git, tmp_path)
    assert config.require_topic_type("feature").prefix == "feat/"
    assert config.require_topic_type("feature").parent == "trunk"
    assert git.created_branches == []


def test_init_global_scope(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="main", local_branches=["main"], config={}
    )

    result = CliRunner().invoke(cli, ["init", "--global", "--no-create-branches"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert {setting[2] for setting in git.config_settings} == {ConfigScope(level="global")}
    assert git.created_branches == []


def test_init_scopes_are_mutually_exclusive(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(tmp_path, config={})

    result = CliRunner().invoke(cli, ["init", "--local", "--system"], obj=ctx)

    assert result.exit_code == 1
    assert "mutually exclusive" in result.output
    assert git.config_settings == []


def test_init_twice_without_force(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(cli, ["init"], obj=ctx)

    assert result.exit_code == ExitCode.VALIDATION_ERROR
    assert "already initialized" in result.output


def test_init_unknown_preset(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path, config={})

    result = CliRunner().invoke(cli, ["init", "--preset", "svn"], obj=ctx)

    assert result.exit_code == 2
    assert "Invalid value for '--preset'" in result.output
