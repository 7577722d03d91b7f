"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from __future__ import annotations

from pathlib import Path

from branchflow.gateway.git.abc import Git
from branchflow.gateway.git.branch_ops.fake import FakeGitBranchOps
from branchflow.gateway.git.config_ops.fake import FakeGitConfigOps
from branchflow.gateway.git.config_ops.types import ConfigScope
from branchflow.gateway.git.merge_ops.fake import CommitRecord, FakeGitMergeOps, MergeRecord
from branchflow.gateway.git.rebase_ops.fake import FakeGitRebaseOps
from branchflow.gateway.git.remote_ops.fake import FakeGitRemoteOps, PushedBranch
from branchflow.gateway.git.repo_ops.fake import FakeGitRepoOps
from branchflow.gateway.git.tag_ops.fake import FakeGitTagOps, TagRecord


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    -----------------
    The sub-gateways share their state containers: the branch checked out by
    branch.checkout_branch() is the target of the next merge.merge(), and the
    unmerged files left by a conflicting merge or rebase are what
    merge.get_unmerged_files() reports until resolve_conflicts() is called.

    Conflict Injection:
    ------------------
    - merge_conflicts: (source, target) -> files for merges and squashes
    - rebase_conflicts: (rebased branch, upstream) -> files for rebases
    Each entry fires once, so re-running the same step after resolution
    succeeds.

    History:
    --------
    - branch_heads: branch -> fake SHA; completed merges, commits and rebases
      move the affected branch to a new fake SHA
    - merged_branches: branch -> branches whose commits it already contains,
      extended by every completed merge or rebase; backs is_ancestor()
    - checkout_errors: branch -> error message for the next checkout of it

    Mutation Tracking:
    -----------------
    The read-only properties below forward to the sub-gateways' tracking.
    """

    def __init__(
        self,
        *,
        current_branches: dict[Path, str | None] | None = None,
        local_branches: list[str] | None = None,
        upstream_branches: dict[str, str] | None = None,
        left_right_counts: dict[tuple[str, str], tuple[int, int]] | None = None,
        branch_heads: dict[str, str] | None = None,
        merged_branches: dict[str, list[str]] | None = None,
        checkout_errors: dict[str, str] | None = None,
        merge_conflicts: dict[tuple[str, str], list[str]] | None = None,
        rebase_conflicts: dict[tuple[str, str], list[str]] | None = None,
        existing_tags: list[str] | None = None,
        remote_branches: list[str] | None = None,
        fetch_raises: Exception | None = None,
        push_raises: Exception | None = None,
        config: dict[str, str | list[str]] | None = None,
        repo_root: Path | None = None,
        git_dir: Path | None = None,
        has_commits: bool = True,
    ) -> None:
        self._current_branches = current_branches if current_branches is not None else {}
        self._local_branches = local_branches if local_branches is not None else []
        self._upstream_branches = upstream_branches if upstream_branches is not None else {}
        self._unmerged_files: list[str] = []
        self._merge_conflicts = merge_conflicts if merge_conflicts is not None else {}
        self._branch_heads = branch_heads if branch_heads is not None else {}
        self._merged_branches = {
            branch: set(contained) for branch, contained in (merged_branches or {}).items()
        }

        self._branch_gateway = FakeGitBranchOps(
            current_branches=self._current_branches,
            local_branches=self._local_branches,
            upstream_branches=self._upstream_branches,
            left_right_counts=left_right_counts,
            branch_heads=self._branch_heads,
            merged_branches=self._merged_branches,
            checkout_errors=checkout_errors,
        )
        self._merge_gateway = FakeGitMergeOps(
            current_branches=self._current_branches,
            merge_conflicts=self._merge_conflicts,
            unmerged_files=self._unmerged_files,
            branch_heads=self._branch_heads,
            merged_branches=self._merged_branches,
        )
        self._rebase_gateway = FakeGitRebaseOps(
            current_branches=self._current_branches,
            rebase_conflicts=rebase_conflicts,
            unmerged_files=self._unmerged_files,
            branch_heads=self._branch_heads,
            merged_branches=self._merged_branches,
        )
        self._tag_gateway = FakeGitTagOps(existing_tags=existing_tags)
        self._remote_gateway = FakeGitRemoteOps(
            remote_branches=remote_branches,
            upstream_branches=self._upstream_branches,
            fetch_raises=fetch_raises,
            push_raises=push_raises,
        )
        self._config_gateway = FakeGitConfigOps(config=config)
        self._repo_gateway = FakeGitRepoOps(
            repo_root=repo_root,
            git_dir=git_dir,
            has_commits=has_commits,
        )

    @property
    def branch(self) -> FakeGitBranchOps:
        return self._branch_gateway

    @property
    def merge(self) -> FakeGitMergeOps:
        return self._merge_gateway

    @property
    def rebase(self) -> FakeGitRebaseOps:
        return self._rebase_gateway

    @property
    def tag(self) -> FakeGitTagOps:
        return self._tag_gateway

    @property
    def remote(self) -> FakeGitRemoteOps:
        return self._remote_gateway

    @property
    def config(self) -> FakeGitConfigOps:
        return self._config_gateway

    @property
    def repo(self) -> FakeGitRepoOps:
        return self._repo_gateway

    # ============================================================================
    # Test Helpers
    # ============================================================================

    def resolve_conflicts(self) -> None:
        """Simulate the user resolving and staging every conflicted file."""
        self._unmerged_files.clear()

    def abandon_merge(self, cwd: Path) -> None:
        """Simulate the user running `git reset --merge` on a paused merge or squash."""
        self._merge_gateway.merge_abort(cwd)

    def add_merge_conflict(self, source: str, target: str, files: list[str]) -> None:
        """Make the next merge of source into target stop on files."""
        self._merge_conflicts[(source, target)] = list(files)

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def local_branches(self) -> list[str]:
        return list(self._local_branches)

    @property
    def unmerged_files(self) -> list[str]:
        return list(self._unmerged_files)

    @property
    def created_branches(self) -> list[tuple[str, str]]:
        return self._branch_gateway.created_branches

    @property
    def checked_out_branches(self) -> list[str]:
        return self._branch_gateway.checked_out_branches

    @property
    def deleted_branches(self) -> list[tuple[str, bool]]:
        return self._branch_gateway.deleted_branches

    @property
    def renamed_branches(self) -> list[tuple[str, str]]:
        return self._branch_gateway.renamed_branches

    @property
    def merges(self) -> list[MergeRecord]:
        return self._merge_gateway.merges

    @property
    def commits(self) -> list[CommitRecord]:
        return self._merge_gateway.commits

    @property
    def rebases(self) -> list[tuple[str, str]]:
        return self._rebase_gateway.rebases

    @property
    def created_tags(self) -> list[TagRecord]:
        return self._tag_gateway.created_tags

    @property
    def pushed_branches(self) -> list[PushedBranch]:
        return self._remote_gateway.pushed_branches

    @property
    def deleted_remote_branches(self) -> list[tuple[str, str]]:
        return self._remote_gateway.deleted_remote_branches

    @property
    def config_values(self) -> dict[str, list[str]]:
        return self._config_gateway.config_values

    @property
    def config_settings(self) -> list[tuple[str, str, ConfigScope]]:
        return self._config_gateway.config_settings
