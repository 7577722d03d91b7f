"""Tests for the `branchflow <type> ...` commands."""

from pathlib import Path

from click.testing import CliRunner

from branchflow.cli.cli import cli
from branchflow.errors import ExitCode
from branchflow.gateway.hooks.types import HookResult
from tests.test_utils.flow_helpers import build_flow_context, classic_entries


def test_feature_start(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(cli, ["feature", "start", "login"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Created branch 'feature/login' from 'develop'" in result.output
    assert git.created_branches == [("feature/login", "develop")]


def test_feature_start_existing_branch_exit_code(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(
        tmp_path, local_branches=["main", "develop", "feature/login"]
    )

    result = CliRunner().invoke(cli, ["feature", "start", "login"], obj=ctx)

    assert result.exit_code == ExitCode.BRANCH_EXISTS
    assert "Error: branch 'feature/login' already exists" in result.output


def test_feature_finish(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="feature/login", local_branches=["main", "develop", "feature/login"]
    )

    result = CliRunner().invoke(cli, ["feature", "finish", "login", "--no-ff"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Successfully finished branch 'feature/login'" in result.output
    assert git.merges[0].target == "develop"


def test_finish_flags_reach_the_merge(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="feature/login", local_branches=["main", "develop", "feature/login"]
    )

    result = CliRunner().invoke(
        cli,
        ["feature", "finish", "--squash", "--squash-message", "Add %b", "--keeplocal"],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert git.commits[0].message == "Add feature/login"
    assert git.deleted_branches == []


def test_release_finish_tag_options(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="release/1.0", local_branches=["main", "develop", "release/1.0"]
    )

    result = CliRunner().invoke(
        cli, ["release", "finish", "1.0", "-T", "v1.0", "-m", "First release"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    [tag] = git.created_tags
    assert (tag.tag_name, tag.message) == ("v1.0", "First release")


def test_release_finish_notag(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, current_branch="release/1.0", local_branches=["main", "develop", "release/1.0"]
    )

    result = CliRunner().invoke(cli, ["release", "finish", "1.0", "--notag"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.created_tags == []


def test_finish_conflict_then_continue(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path,
        current_branch="feature/login",
        local_branches=["main", "develop", "feature/login"],
        merge_conflicts={("feature/login", "develop"): ["app.py"]},
    )
    runner = CliRunner()

    paused = runner.invoke(cli, ["feature", "finish", "login"], obj=ctx)
    assert paused.exit_code == ExitCode.PAUSED
    assert "Merge conflict detected while finishing feature/login" in paused.output
    assert "app.py" in paused.output

    unresolved = runner.invoke(cli, ["feature", "finish", "--continue"], obj=ctx)
    assert unresolved.exit_code == ExitCode.NOT_INITIALIZED
    assert "unresolved conflicts" in unresolved.output

    git.resolve_conflicts()
    resumed = runner.invoke(cli, ["feature", "finish", "--continue"], obj=ctx)
    assert resumed.exit_code == 0, resumed.output
    assert ctx.state_store().load() is None


def test_finish_abort(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path,
        current_branch="feature/login",
        local_branches=["main", "develop", "feature/login"],
        merge_conflicts={("feature/login", "develop"): ["app.py"]},
    )
    runner = CliRunner()
    runner.invoke(cli, ["feature", "finish", "login"], obj=ctx)

    result = runner.invoke(cli, ["feature", "finish", "-a"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Aborted finish of 'feature/login'" in result.output
    assert git.branch.get_current_branch(tmp_path) == "feature/login"


def test_continue_and_abort_together(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(cli, ["feature", "finish", "--continue", "--abort"], obj=ctx)

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_pre_hook_rejection_exit_code(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(
        tmp_path,
        current_branch="feature/login",
        local_branches=["main", "develop", "feature/login"],
        scripts={"pre-flow-feature-finish": HookResult(exit_code=1, stdout="nope")},
    )

    result = CliRunner().invoke(cli, ["feature", "finish"], obj=ctx)

    assert result.exit_code == ExitCode.GIT_ERROR
    assert "pre-hook 'pre-flow-feature-finish' failed" in result.output


def test_publish_and_track(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path,
        current_branch="feature/login",
        local_branches=["main", "develop", "feature/login"],
        remote_branches=["origin/bugfix/crash"],
    )
    runner = CliRunner()

    published = runner.invoke(cli, ["feature", "publish", "-o", "ci.skip"], obj=ctx)
    tracked = runner.invoke(cli, ["bugfix", "track", "crash"], obj=ctx)

    assert published.exit_code == 0, published.output
    assert git.pushed_branches[0].push_options == ["ci.skip"]
    assert tracked.exit_code == 0, tracked.output
    assert "bugfix/crash" in git.local_branches


def test_delete_and_rename(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, local_branches=["main", "develop", "feature/a", "feature/b"]
    )
    runner = CliRunner()

    renamed = runner.invoke(cli, ["feature", "rename", "a", "c"], obj=ctx)
    deleted = runner.invoke(cli, ["feature", "delete", "b", "-f"], obj=ctx)

    assert renamed.exit_code == 0, renamed.output
    assert deleted.exit_code == 0, deleted.output
    assert git.renamed_branches == [("feature/a", "feature/c")]
    assert git.deleted_branches == [("feature/b", True)]


def test_list_marks_current_branch(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(
        tmp_path,
        current_branch="feature/b",
        local_branches=["main", "develop", "feature/a", "feature/b"],
    )

    result = CliRunner().invoke(cli, ["feature", "list"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "  a" in result.output
    assert "* b" in result.output


def test_list_verbose_table(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(
        tmp_path,
        local_branches=["main", "develop", "feature/a"],
        config=classic_entries(**{"gitflow.branch.feature/a.base": "develop"}),
    )

    result = CliRunner().invoke(cli, ["feature", "list", "-v"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "feature/a" in result.output
    assert "develop" in result.output


def test_list_empty(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(cli, ["hotfix", "list"], obj=ctx)

    assert result.exit_code == 0
    assert "No hotfix branches exist" in result.output


def test_checkout(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, local_branches=["main", "develop", "feature/login"]
    )

    result = CliRunner().invoke(cli, ["feature", "checkout", "log"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.branch.get_current_branch(tmp_path) == "feature/login"


def test_typed_update(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, local_branches=["main", "develop", "feature/login"]
    )

    result = CliRunner().invoke(cli, ["feature", "update", "login"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.rebases == [("feature/login", "develop")]


def test_custom_topic_type_gets_commands(tmp_path: Path) -> None:
    config = classic_entries(
        **{
            "gitflow.branch.chore.type": "topic",
            "gitflow.branch.chore.parent": "develop",
            "gitflow.branch.chore.prefix": "chore/",
        }
    )
    ctx, git, _hooks = build_flow_context(tmp_path, config=config)

    result = CliRunner().invoke(cli, ["chore", "start", "deps"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.created_branches == [("chore/deps", "develop")]


def test_unknown_topic_type_is_not_a_command(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    result = CliRunner().invoke(cli, ["experiment", "start", "x"], obj=ctx)

    assert result.exit_code == 2
    assert "No such command" in result.output


def test_default_type_missing_from_config(tmp_path: Path) -> None:
    config = {
        key: value
        for key, value in classic_entries().items()
        if not key.startswith("gitflow.branch.support.")
    }
    ctx, _git, _hooks = build_flow_context(tmp_path, config=config)

    result = CliRunner().invoke(cli, ["support", "start", "1.x"], obj=ctx)

    assert result.exit_code == ExitCode.INVALID_INPUT
    assert "unknown branch type: support" in result.output


def test_notag_and_keeplocal_apply_after_bare_continue(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path,
        current_branch="release/1.0",
        local_branches=["main", "develop", "release/1.0"],
        merge_conflicts={("release/1.0", "main"): ["VERSION"]},
    )
    runner = CliRunner()

    paused = runner.invoke(cli, ["release", "finish", "1.0", "--notag", "--keeplocal"], obj=ctx)
    assert paused.exit_code == ExitCode.PAUSED

    git.resolve_conflicts()
    resumed = runner.invoke(cli, ["release", "finish", "--continue"], obj=ctx)

    assert resumed.exit_code == 0, resumed.output
    assert git.created_tags == []
    assert git.deleted_branches == []
    assert "release/1.0" in git.local_branches
