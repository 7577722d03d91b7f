"""Fake implementation of Git rebase operations for testing."""

from __future__ import annotations

from pathlib import Path

from branchflow.gateway.git.abc import GitCommandResult
from branchflow.gateway.git.branch_ops.fake import advance_branch
from branchflow.gateway.git.merge_ops.fake import conflict_output
from branchflow.gateway.git.rebase_ops.abc import GitRebaseOps


class FakeGitRebaseOps(GitRebaseOps):
    """In-memory fake implementation of Git rebase operations.

    Constructor Injection:
    ---------------------
    - rebase_conflicts: Mapping of (branch, upstream) -> conflicted files. A
      matching rebase stops with those files unmerged; the entry is consumed.
    - unmerged_files: Shared list of currently unmerged paths.
    - branch_heads, merged_branches: Shared history containers; a completed
      rebase moves the rebased branch forward on top of its upstream.

    Mutation Tracking:
    -----------------
    - rebases: (branch, upstream) for every rebase() call
    - rebase_continue_calls: Number of rebase_continue() calls
    - rebase_abort_calls: Number of rebase_abort() calls
    """


    def __init__(
        self,
        *,
        current_branches: dict[Path, str | None] | None = None,
        rebase_conflicts: dict[tuple[str, str], list[str]] | None = None,
        unmerged_files: list[str] | None = None,
        branch_heads: dict[str, str] | None = None,
        merged_branches: dict[str, set[str]] | None = None,
    ) -> None:
        self._current_branches = current_branches if current_branches is not None else {}
        self._rebase_conflicts = rebase_conflicts if rebase_conflicts is not None else {}
        self._unmerged_files = unmerged_files if unmerged_files is not None else []
        self._branch_heads = branch_heads if branch_heads is not None else {}
        self._merged_branches = merged_branches if merged_branches is not None else {}
        self._in_progress: dict[Path, tuple[str, str]] = {}

        # Mutation tracking
        self._rebases: list[tuple[str, str]] = []
        self._rebase_continue_calls = 0
        self._rebase_abort_calls = 0

    def rebase(self, cwd: Path, upstream: str, *, rebase_merges: bool) -> GitCommandResult:
        branch = self._current_branches.get(cwd) or ""
        self._rebases.append((branch, upstream))

        key = (branch, upstream)
        if key in self._rebase_conflicts:
            files = self._rebase_conflicts.pop(key)
            self._unmerged_files.extend(files)
            self._in_progress[cwd] = key
            return GitCommandResult(returncode=1, output=conflict_output(files))
        advance_branch(self._branch_heads, self._merged_branches, branch, integrated=upstream)
        return GitCommandResult(
            returncode=0, output=f"Successfully rebased and updated refs/heads/{branch}.\n"
        )

    def rebase_continue(self, cwd: Path) -> GitCommandResult:
        self._rebase_continue_calls += 1
        if cwd not in self._in_progress:
            return GitCommandResult(returncode=128, output="fatal: No rebase in progress?")
        if self._unmerged_files:
            return GitCommandResult(
                returncode=1,
                output="error: you must edit all merge conflicts and then mark them as resolved",
            )
        branch, upstream = self._in_progress.pop(cwd)
        advance_branch(self._branch_heads, self._merged_branches, branch, integrated=upstream)
        return GitCommandResult(
            returncode=0, output=f"Successfully rebased and updated refs/heads/{branch}.\n"
        )

    def rebase_abort(self, cwd: Path) -> None:
        self._rebase_abort_calls += 1
        self._in_progress.pop(cwd, None)
        self._unmerged_files.clear()

    def is_rebase_in_progress(self, cwd: Path) -> bool:
        return cwd in self._in_progress

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def rebases(self) -> list[tuple[str, str]]:
        return self._rebases.copy()

    @property
    def rebase_continue_calls(self) -> int:
        return self._rebase_continue_calls

    @property
    def rebase_abort_calls(self) -> int:
        return self._rebase_abort_calls
