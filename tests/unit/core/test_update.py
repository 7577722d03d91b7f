"""Tests for UpdateOrchestrator with FakeGit."""

from pathlib import Path

import pytest

from branchflow.core.config_store import preset_config
from branchflow.core.resume import abort_operation, continue_operation
from branchflow.core.operation_state import MergeOperationState
from branchflow.core.update import UpdateOrchestrator, UpdateRequest, resolve_update_parent
from branchflow.errors import (
    BranchNotFoundError,
    ConfigurationError,
    MergeConflictError,
    NoMergeInProgressError,
)
from branchflow.gateway.hooks.types import HookResult
from tests.test_utils.flow_helpers import build_flow_context


def test_resolve_update_parent_for_base_and_topic() -> None:
    config = preset_config("classic")

    parent, strategy, branch_config = resolve_update_parent(config, "develop")
    assert (parent, strategy, branch_config.name) == ("main", "merge", "develop")

    parent, strategy, branch_config = resolve_update_parent(config, "feature/login")
    assert (parent, strategy, branch_config.name) == ("develop", "rebase", "feature")


def test_resolve_update_parent_rejects_root_and_unknown() -> None:
    config = preset_config("classic")

    with pytest.raises(ConfigurationError, match="no parent"):
        resolve_update_parent(config, "main")
    with pytest.raises(ConfigurationError, match="neither"):
        resolve_update_parent(config, "experiment")


def test_update_topic_branch_rebases_onto_parent(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path,
        current_branch="feature/login",
        local_branches=["main", "develop", "feature/login"],
    )

    result = UpdateOrchestrator(ctx).update(UpdateRequest())

    assert (result.branch, result.parent, result.strategy) == (
        "feature/login",
        "develop",
        "rebase",
    )
    assert git.rebases == [("feature/login", "develop")]
    assert ctx.state_store().load() is None


def test_update_base_branch_merges_parent(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    ctx, git, _hooks = build_flow_context(tmp_path, current_branch="main")

    UpdateOrchestrator(ctx).update(UpdateRequest(branch="develop"))

    [merge] = git.merges
    assert (merge.source, merge.target, merge.no_ff) == ("main", "develop", True)
    assert "Successfully updated 'develop' from 'main'" in capsys.readouterr().err


def test_rebase_flag_overrides_strategy(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(tmp_path)

    result = UpdateOrchestrator(ctx).update(UpdateRequest(branch="develop", rebase=True))

    assert result.strategy == "rebase"
    assert git.rebases == [("develop", "main")]
    assert git.merges == []


def test_typed_update_accepts_short_name(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, local_branches=["main", "develop", "feature/login"]
    )

    result = UpdateOrchestrator(ctx).update(UpdateRequest(branch="login", branch_type="feature"))

    assert result.branch == "feature/login"
    assert git.rebases == [("feature/login", "develop")]


def test_typed_update_of_current_branch_checks_prefix(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path, current_branch="develop")

    with pytest.raises(ConfigurationError, match="not a feature branch"):
        UpdateOrchestrator(ctx).update(UpdateRequest(branch_type="feature"))


def test_update_missing_branch(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    with pytest.raises(BranchNotFoundError):
        UpdateOrchestrator(ctx).update(UpdateRequest(branch="nope"))


def test_topic_update_runs_hooks(tmp_path: Path) -> None:
    ctx, _git, hooks = build_flow_context(
        tmp_path,
        current_branch="feature/login",
        local_branches=["main", "develop", "feature/login"],
        scripts={
            "pre-flow-feature-update": HookResult(exit_code=0),
            "post-flow-feature-update": HookResult(exit_code=0),
        },
    )

    UpdateOrchestrator(ctx).update(UpdateRequest())

    assert hooks.run_names == ["pre-flow-feature-update", "post-flow-feature-update"]
    assert hooks.runs[0].args == ["login", "origin", "feature/login", "develop"]


def test_conflict_pauses_and_continue_commits_with_message(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, merge_conflicts={("main", "develop"): ["README.md"]}
    )

    with pytest.raises(MergeConflictError) as exc_info:
        UpdateOrchestrator(ctx).update(
            UpdateRequest(branch="develop", update_message="Sync %b with %p")
        )
    assert "while updating develop" in exc_info.value.report
    state = ctx.state_store().load()
    assert state is not None
    assert state.action == "update"
    assert state.branch_type == "base"

    git.resolve_conflicts()
    continue_operation(ctx)

    assert git.commits[0].message == "Sync develop with main"
    assert ctx.state_store().load() is None


def test_abort_paused_rebase(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path,
        current_branch="feature/login",
        local_branches=["main", "develop", "feature/login"],
        rebase_conflicts={("feature/login", "develop"): ["app.py"]},
    )
    with pytest.raises(MergeConflictError):
        UpdateOrchestrator(ctx).update(UpdateRequest())

    abort_operation(ctx)

    assert git.rebase.rebase_abort_calls == 1
    assert ctx.state_store().load() is None


def test_continue_without_paused_operation(tmp_path: Path) -> None:
    ctx, _git, _hooks = build_flow_context(tmp_path)

    with pytest.raises(NoMergeInProgressError):
        continue_operation(ctx)
    with pytest.raises(NoMergeInProgressError):
        abort_operation(ctx)


def test_continue_after_merge_reset_updates_again(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(
        tmp_path, merge_conflicts={("main", "develop"): ["README.md"]}
    )
    with pytest.raises(MergeConflictError):
        UpdateOrchestrator(ctx).update(UpdateRequest(branch="develop"))
    git.abandon_merge(tmp_path)

    continue_operation(ctx)

    assert [(m.source, m.target) for m in git.merges] == [("main", "develop"), ("main", "develop")]
    assert git.branch.is_ancestor(tmp_path, "main", "develop")
    assert ctx.state_store().load() is None


def test_resume_refuses_a_finish_record(tmp_path: Path) -> None:
    ctx, git, _hooks = build_flow_context(tmp_path)
    ctx.state_store().save(
        MergeOperationState(
            action="finish",
            branch_type="feature",
            branch_name="login",
            full_branch_name="feature/login",
            parent_branch="develop",
            merge_strategy="merge",
        )
    )

    with pytest.raises(NoMergeInProgressError):
        UpdateOrchestrator(ctx).resume()

    assert git.merges == []
