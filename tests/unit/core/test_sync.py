"""Tests for comparing a branch with its remote tracking branch."""

from pathlib import Path

import pytest

from branchflow.core.sync import SyncStatus, check_finish_sync, classify_sync, compare_with_remote
from branchflow.errors import BranchBehindRemoteError
from branchflow.gateway.git.fake import FakeGit


@pytest.mark.parametrize(
    ("ahead", "behind", "status", "count"),
    [
        (0, 0, SyncStatus.EQUAL, 0),
        (3, 0, SyncStatus.AHEAD, 3),
        (0, 2, SyncStatus.BEHIND, 2),
        (2, 5, SyncStatus.DIVERGED, 7),
    ],
)
def test_classify_sync(ahead: int, behind: int, status: SyncStatus, count: int) -> None:
    assert classify_sync(ahead, behind) == (status, count)


def test_branch_without_upstream_is_not_tracking(tmp_path: Path) -> None:
    git = FakeGit(repo_root=tmp_path, local_branches=["feature/x"])

    result = compare_with_remote(git, tmp_path, "feature/x")

    assert result.status == SyncStatus.NO_TRACKING
    assert result.tracking_branch is None


def test_behind_branch_blocks_finish(tmp_path: Path) -> None:
    git = FakeGit(
        repo_root=tmp_path,
        local_branches=["feature/x"],
        upstream_branches={"feature/x": "origin/feature/x"},
        left_right_counts={("feature/x", "origin/feature/x"): (0, 2)},
    )

    with pytest.raises(BranchBehindRemoteError) as exc_info:
        check_finish_sync(git, tmp_path, "feature/x", branch_type="feature")

    message = str(exc_info.value)
    assert "is behind 'origin/feature/x' (2 commit(s))" in message
    assert "branchflow feature update" in message
    assert "--force" in message


def test_diverged_branch_blocks_finish(tmp_path: Path) -> None:
    git = FakeGit(
        repo_root=tmp_path,
        upstream_branches={"feature/x": "origin/feature/x"},
        left_right_counts={("feature/x", "origin/feature/x"): (1, 1)},
    )

    with pytest.raises(BranchBehindRemoteError, match="diverged"):
        check_finish_sync(git, tmp_path, "feature/x", branch_type="feature")


def test_ahead_branch_is_allowed_with_a_note(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    git = FakeGit(
        repo_root=tmp_path,
        upstream_branches={"feature/x": "origin/feature/x"},
        left_right_counts={("feature/x", "origin/feature/x"): (4, 0)},
    )

    result = check_finish_sync(git, tmp_path, "feature/x", branch_type="feature")

    assert result.status == SyncStatus.AHEAD
    assert "4 commit(s) ahead of remote" in capsys.readouterr().err
