"""Tests for `branchflow config ...`."""

from pathlib import Path

from click.testing import CliRunner

from branchflow.cli.cli import cli
from branchflow.errors import ExitCode
from tests.test_utils.flow_helpers import build_flow_context


def test_add_base_and_topic(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(tmp_path)
    runner = CliRunner()

    base = runner.invoke(
        cli,
        ["config", "add", "base", "staging", "main", "--downstream-strategy", "merge", "--auto-update"],
        obj=ctx,
    )
    topic = runner.invoke(
        cli, ["config", "add", "topic", "chore", "develop", "--prefix", "ch/"], obj=ctx
    )

    assert base.exit_code == 0, base.output
    assert "Added base branch 'staging'" in base.output
    assert topic.exit_code == 0, topic.output
    config = ctx.load_config()
    assert config.get("staging").auto_update is True
    assert config.require_topic_type("chore").prefix == "ch/"
    assert git.created_branches == [("staging", "main")]


def test_add_topic_with_unknown_strategy(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(
        cli,
        ["config", "add", "topic", "chore", "develop", "--upstream-strategy", "octopus"],
        obj=ctx,
    )

    assert result.exit_code == 2
    assert ctx.load_config().get("chore") is None


def test_edit_topic(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(
        cli, ["config", "edit", "topic", "release", "--tag-prefix", "v"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert ctx.load_config().require_topic_type("release").tag_prefix == "v"


def test_edit_missing_branch(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(cli, ["config", "edit", "base", "qa", "--auto-update"], obj=ctx)

    assert result.exit_code == ExitCode.BRANCH_NOT_FOUND
    assert "Error: " in result.output


def test_rename_and_delete(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)
    runner = CliRunner()

    renamed = runner.invoke(cli, ["config", "rename", "topic", "bugfix", "fix"], obj=ctx)
    deleted = runner.invoke(cli, ["config", "delete", "topic", "support"], obj=ctx)
    refused = runner.invoke(cli, ["config", "delete", "base", "develop"], obj=ctx)

    assert renamed.exit_code == 0, renamed.output
    assert deleted.exit_code == 0, deleted.output
    assert refused.exit_code == ExitCode.VALIDATION_ERROR
    assert "depends on it" in refused.output
    config = ctx.load_config()
    assert config.get("fix") is not None
    assert config.get("bugfix") is None
    assert config.get("support") is None


def test_list_shows_hierarchy(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(cli, ["config", "list"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "  develop" in result.output
    assert "feature/" in result.output


def test_list_not_initialized(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path, config={})

    result = CliRunner().invoke(cli, ["config", "list"], obj=ctx)

    assert result.exit_code == ExitCode.NOT_INITIALIZED
    assert "not initialized" in result.output
