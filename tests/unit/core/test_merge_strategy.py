"""Tests for MergeStrategyExecutor against FakeGit."""

from pathlib import Path

from branchflow.core.merge_strategy import (
    MergeConflict,
    MergeFatal,
    MergeOptions,
    MergeStrategyExecutor,
    MergeSuccess,
)
from branchflow.gateway.git.fake import FakeGit


def _git(tmp_path: Path, **kwargs) -> FakeGit:
    return FakeGit(
        repo_root=tmp_path,
        current_branches={tmp_path: "feature/x"},
        local_branches=["main", "develop", "feature/x"],
        **kwargs,
    )


def test_merge_checks_out_target_and_uses_default_message(tmp_path: Path) -> None:
    git = _git(tmp_path)
    executor = MergeStrategyExecutor(git, tmp_path)

    outcome = executor.apply("merge", "feature/x", "develop", MergeOptions())

    assert outcome == MergeSuccess()
    assert git.checked_out_branches == ["develop"]
    [merge] = git.merges
    assert merge.source == "feature/x"
    assert merge.target == "develop"
    assert merge.no_ff is True
    assert merge.message == "Merge branch 'feature/x' into develop"


def test_none_strategy_does_nothing(tmp_path: Path) -> None:
    git = _git(tmp_path)

    outcome = MergeStrategyExecutor(git, tmp_path).apply(
        "none", "feature/x", "develop", MergeOptions()
    )

    assert outcome == MergeSuccess()
    assert git.merges == []
    assert git.checked_out_branches == []


def test_merge_conflict_reports_files(tmp_path: Path) -> None:
    git = _git(tmp_path, merge_conflicts={("feature/x", "develop"): ["app.py"]})

    outcome = MergeStrategyExecutor(git, tmp_path).apply(
        "merge", "feature/x", "develop", MergeOptions()
    )

    assert isinstance(outcome, MergeConflict)
    assert outcome.files == ("app.py",)


def test_squash_commits_with_default_message(tmp_path: Path) -> None:
    git = _git(tmp_path)

    outcome = MergeStrategyExecutor(git, tmp_path).apply(
        "squash", "feature/x", "develop", MergeOptions(no_verify=True)
    )

    assert outcome == MergeSuccess()
    assert git.merges[0].squash is True
    [commit] = git.commits
    assert commit.branch == "develop"
    assert commit.message == "Squashed commit of branch 'feature/x'"
    assert commit.no_verify is True


def test_topic_rebase_rebases_source_then_merges(tmp_path: Path) -> None:
    git = _git(tmp_path)

    outcome = MergeStrategyExecutor(git, tmp_path).apply(
        "rebase", "feature/x", "develop", MergeOptions(rebase_direction="topic")
    )

    assert outcome == MergeSuccess()
    assert git.rebases == [("feature/x", "develop")]
    assert git.checked_out_branches == ["feature/x", "develop"]
    assert git.merges[0].source == "feature/x"


def test_branch_rebase_rebases_target_onto_source(tmp_path: Path) -> None:
    git = _git(tmp_path)

    outcome = MergeStrategyExecutor(git, tmp_path).apply(
        "rebase", "main", "develop", MergeOptions(rebase_direction="branch")
    )

    assert outcome == MergeSuccess()
    assert git.rebases == [("develop", "main")]
    assert git.merges == []


def test_checkout_failure_is_fatal(tmp_path: Path) -> None:
    git = _git(tmp_path)

    outcome = MergeStrategyExecutor(git, tmp_path).apply(
        "merge", "feature/x", "missing", MergeOptions()
    )

    assert isinstance(outcome, MergeFatal)
    assert "missing" in outcome.message


def test_resume_merge_commits_resolution(tmp_path: Path) -> None:
    git = _git(tmp_path, merge_conflicts={("feature/x", "develop"): ["app.py"]})
    executor = MergeStrategyExecutor(git, tmp_path)
    executor.apply("merge", "feature/x", "develop", MergeOptions(message="Custom"))
    git.resolve_conflicts()

    outcome = executor.resume(
        "merge", "feature/x", "develop", MergeOptions(message="Custom"), target_head=""
    )

    assert outcome == MergeSuccess()
    assert git.commits[0].message == "Custom"


def test_resume_after_user_committed_is_success(tmp_path: Path) -> None:
    git = _git(tmp_path, merged_branches={"develop": ["feature/x"]})

    outcome = MergeStrategyExecutor(git, tmp_path).resume(
        "merge", "feature/x", "develop", MergeOptions(), target_head=""
    )

    assert outcome == MergeSuccess()
    assert git.commits == []


def test_resume_topic_rebase_continues_then_merges(tmp_path: Path) -> None:
    git = _git(tmp_path, rebase_conflicts={("feature/x", "develop"): ["app.py"]})
    executor = MergeStrategyExecutor(git, tmp_path)
    first = executor.apply("rebase", "feature/x", "develop", MergeOptions())
    assert isinstance(first, MergeConflict)
    git.resolve_conflicts()

    outcome = executor.resume("rebase", "feature/x", "develop", MergeOptions(), target_head="")

    assert outcome == MergeSuccess()
    assert git.rebase.rebase_continue_calls == 1
    assert git.merges[-1].target == "develop"


def test_resume_topic_rebase_with_conflicted_trailing_merge(tmp_path: Path) -> None:
    git = _git(tmp_path, merge_conflicts={("feature/x", "develop"): ["app.py"]})
    executor = MergeStrategyExecutor(git, tmp_path)
    first = executor.apply("rebase", "feature/x", "develop", MergeOptions())
    assert isinstance(first, MergeConflict)
    git.resolve_conflicts()

    outcome = executor.resume("rebase", "feature/x", "develop", MergeOptions(), target_head="")

    assert outcome == MergeSuccess()
    assert git.rebase.rebase_continue_calls == 0
    assert git.commits[0].branch == "develop"


def test_resume_applies_merge_that_never_started(tmp_path: Path) -> None:
    git = _git(tmp_path, checkout_errors={"develop": "error: local changes would be overwritten"})
    executor = MergeStrategyExecutor(git, tmp_path)
    first = executor.apply("merge", "feature/x", "develop", MergeOptions())
    assert isinstance(first, MergeFatal)

    outcome = executor.resume(
        "merge", "feature/x", "develop", MergeOptions(), target_head="develop@0"
    )

    assert outcome == MergeSuccess()
    assert [(m.source, m.target) for m in git.merges] == [("feature/x", "develop")]
    assert git.branch.is_ancestor(tmp_path, "feature/x", "develop")


def test_resume_squash_backed_out_by_user_is_applied_again(tmp_path: Path) -> None:
    git = _git(tmp_path, merge_conflicts={("feature/x", "develop"): ["app.py"]})
    executor = MergeStrategyExecutor(git, tmp_path)
    head = git.branch.get_branch_head(tmp_path, "develop")
    first = executor.apply("squash", "feature/x", "develop", MergeOptions())
    assert isinstance(first, MergeConflict)
    git.abandon_merge(tmp_path)

    outcome = executor.resume(
        "squash", "feature/x", "develop", MergeOptions(), target_head=head or ""
    )

    assert outcome == MergeSuccess()
    assert len(git.merges) == 2
    assert git.merges[1].squash is True
    [commit] = git.commits
    assert commit.message == "Squashed commit of branch 'feature/x'"
    assert git.branch.get_branch_head(tmp_path, "develop") != head


def test_resume_squash_committed_by_user_is_success(tmp_path: Path) -> None:
    git = _git(tmp_path, merge_conflicts={("feature/x", "develop"): ["app.py"]})
    executor = MergeStrategyExecutor(git, tmp_path)
    head = git.branch.get_branch_head(tmp_path, "develop")
    executor.apply("squash", "feature/x", "develop", MergeOptions())
    git.resolve_conflicts()
    git.merge.commit(tmp_path, "My own squash message", no_verify=False)

    outcome = executor.resume(
        "squash", "feature/x", "develop", MergeOptions(), target_head=head or ""
    )

    assert outcome == MergeSuccess()
    assert len(git.merges) == 1
    assert [c.message for c in git.commits] == ["My own squash message"]


def test_resume_does_not_commit_on_another_branch(tmp_path: Path) -> None:
    git = _git(tmp_path, merge_conflicts={("feature/x", "develop"): ["app.py"]})
    executor = MergeStrategyExecutor(git, tmp_path)
    executor.apply("merge", "feature/x", "develop", MergeOptions())
    git.resolve_conflicts()
    git.branch.checkout_branch(tmp_path, "feature/x")

    outcome = executor.resume("merge", "feature/x", "develop", MergeOptions(), target_head="")

    assert outcome == MergeSuccess()
    assert [c.branch for c in git.commits] == []
    assert git.merges[-1].target == "develop"


def test_abort_uses_matching_git_command(tmp_path: Path) -> None:
    git = _git(tmp_path)
    executor = MergeStrategyExecutor(git, tmp_path)

    executor.abort("merge")
    executor.abort("squash")
    executor.abort("none")

    assert git.merge.merge_abort_calls == 2
    assert git.rebase.rebase_abort_calls == 0


def test_abort_rebase_only_when_in_progress(tmp_path: Path) -> None:
    git = _git(tmp_path, rebase_conflicts={("feature/x", "develop"): ["a.txt"]})
    executor = MergeStrategyExecutor(git, tmp_path)

    executor.abort("rebase")
    assert git.rebase.rebase_abort_calls == 0

    executor.apply("rebase", "feature/x", "develop", MergeOptions())
    executor.abort("rebase")
    assert git.rebase.rebase_abort_calls == 1
    assert git.unmerged_files == []
