"""Tests for hook and filter policy."""

from pathlib import Path

import pytest

from branchflow.core.hooks import (
    FlowHooks,
    HookContext,
    build_hook_args,
    build_hook_env,
    resolve_hooks_dir,
)
from branchflow.errors import FilterFailureError, HookRejectionError
from branchflow.gateway.git.fake import FakeGit
from branchflow.gateway.hooks.fake import FakeHookRunner
from branchflow.gateway.hooks.types import HookResult

CONTEXT = HookContext(
    branch_type="feature",
    branch_name="login",
    full_branch="feature/login",
    base_branch="develop",
    origin="origin",
)


def _hooks(tmp_path: Path, scripts: dict[str, HookResult]) -> tuple[FlowHooks, FakeHookRunner]:
    runner = FakeHookRunner(scripts=scripts)
    return FlowHooks(runner, tmp_path / "hooks", tmp_path), runner


def test_hooks_dir_defaults_to_git_common_dir(tmp_path: Path) -> None:
    git = FakeGit(repo_root=tmp_path)

    assert resolve_hooks_dir(git, tmp_path, tmp_path) == tmp_path / ".git" / "hooks"


def test_hooks_dir_prefers_gitflow_path(tmp_path: Path) -> None:
    git = FakeGit(
        repo_root=tmp_path,
        config={"gitflow.path.hooks": "flow-hooks", "core.hooksPath": "/etc/hooks"},
    )

    assert resolve_hooks_dir(git, tmp_path, tmp_path) == tmp_path / "flow-hooks"


def test_hooks_dir_uses_core_hooks_path(tmp_path: Path) -> None:
    git = FakeGit(repo_root=tmp_path, config={"core.hooksPath": "/etc/hooks"})

    assert resolve_hooks_dir(git, tmp_path, tmp_path) == Path("/etc/hooks")


def test_base_argument_only_for_start_and_update() -> None:
    assert build_hook_args("start", CONTEXT) == ["login", "origin", "feature/login", "develop"]
    assert build_hook_args("finish", CONTEXT) == ["login", "origin", "feature/login"]


def test_env_includes_exit_code_and_version() -> None:
    env = build_hook_env(
        HookContext("release", "1.0", "release/1.0", "main", "origin", version="1.0"),
        exit_code=0,
    )

    assert env["BRANCH"] == "release/1.0"
    assert env["VERSION"] == "1.0"
    assert env["EXIT_CODE"] == "0"


def test_missing_hooks_are_skipped(tmp_path: Path) -> None:
    hooks, runner = _hooks(tmp_path, {})

    hooks.run_pre_hook("finish", CONTEXT)
    hooks.run_post_hook("finish", CONTEXT, exit_code=0)

    assert runner.runs == []


def test_failing_pre_hook_vetoes(tmp_path: Path) -> None:
    hooks, _runner = _hooks(
        tmp_path, {"pre-flow-feature-finish": HookResult(exit_code=1, stderr="tests failed")}
    )

    with pytest.raises(HookRejectionError, match="tests failed"):
        hooks.run_pre_hook("finish", CONTEXT)


def test_failing_post_hook_only_warns(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    hooks, runner = _hooks(tmp_path, {"post-flow-feature-finish": HookResult(exit_code=2)})

    hooks.run_post_hook("finish", CONTEXT, exit_code=0)

    assert runner.runs[0].env["EXIT_CODE"] == "0"
    assert "post-hook 'post-flow-feature-finish' failed" in capsys.readouterr().err


def test_with_hooks_reports_failure_to_post_hook(tmp_path: Path) -> None:
    hooks, runner = _hooks(
        tmp_path,
        {
            "pre-flow-feature-delete": HookResult(exit_code=0),
            "post-flow-feature-delete": HookResult(exit_code=0),
        },
    )

    def fail() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        hooks.with_hooks("delete", CONTEXT, fail)

    assert runner.run_names == ["pre-flow-feature-delete", "post-flow-feature-delete"]
    assert runner.runs[1].env["EXIT_CODE"] == "1"


def test_with_hooks_returns_operation_result(tmp_path: Path) -> None:
    hooks, runner = _hooks(tmp_path, {"post-flow-feature-start": HookResult(exit_code=0)})

    assert hooks.with_hooks("start", CONTEXT, lambda: "feature/login") == "feature/login"
    assert runner.runs[0].env["EXIT_CODE"] == "0"


def test_version_filter_replaces_value(tmp_path: Path) -> None:
    hooks, runner = _hooks(
        tmp_path, {"filter-flow-release-start-version": HookResult(exit_code=0, stdout="2.0.0\n")}
    )
    context = HookContext("release", "2.0", "release/2.0", "develop", "origin", version="2.0")

    assert hooks.run_version_filter(context, "2.0") == "2.0.0"
    assert runner.runs[0].args == ["2.0"]


def test_empty_filter_output_keeps_value(tmp_path: Path) -> None:
    hooks, _runner = _hooks(
        tmp_path, {"filter-flow-feature-finish-tag-message": HookResult(exit_code=0, stdout="  ")}
    )

    assert hooks.run_tag_message_filter(CONTEXT, "login", "Tagging") == "Tagging"


def test_failing_filter_raises(tmp_path: Path) -> None:
    hooks, _runner = _hooks(
        tmp_path,
        {"filter-flow-feature-start-version": HookResult(exit_code=3, stderr="bad version")},
    )

    with pytest.raises(FilterFailureError, match="bad version"):
        hooks.run_version_filter(CONTEXT, "login")
