"""Fake implementation of Git merge operations for testing."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

from branchflow.gateway.git.abc import GitCommandResult
from branchflow.gateway.git.branch_ops.fake import advance_branch
from branchflow.gateway.git.merge_ops.abc import GitMergeOps


class MergeRecord(NamedTuple):
    """A merge invocation: source merged into target (the checked-out branch)."""

    source: str
    target: str | None
    no_ff: bool
    squash: bool
    no_verify: bool
    message: str | None


class CommitRecord(NamedTuple):
    branch: str | None
    message: str
    no_verify: bool


def conflict_output(files: list[str]) -> str:
    """Render the transcript git prints when a merge stops on conflicts."""
    lines = []
    for path in files:
        lines.append(f"Auto-merging {path}")
        lines.append(f"CONFLICT (content): Merge conflict in {path}")
    lines.append("Automatic merge failed; fix conflicts and then commit the result.")
    return "\n".join(lines)


class FakeGitMergeOps(GitMergeOps):
    """In-memory fake implementation of Git merge operations.

    Constructor Injection:
    ---------------------
    - merge_conflicts: Mapping of (source, target) -> conflicted files. A
      matching merge (plain or squash) stops with those files unmerged. Each
      entry is consumed by the merge that triggers it.
    - unmerged_files: Shared list of currently unmerged paths.
    - branch_heads, merged_branches: Shared history containers; a completed
      merge or commit moves the checked-out branch forward.

    Mutation Tracking:
    -----------------
    - merges: Every merge() invocation, including ones that conflicted
    - commits: Commits created via commit()
    - merge_abort_calls: Number of merge_abort() calls
    """

    def __init__(
        self,
        *,
        current_branches: dict[Path, str | None] | None = None,
        merge_conflicts: dict[tuple[str, str], list[str]] | None = None,
        unmerged_files: list[str] | None = None,
        branch_heads: dict[str, str] | None = None,
        merged_branches: dict[str, set[str]] | None = None,
    ) -> None:
        self._current_branches = current_branches if current_branches is not None else {}
        self._merge_conflicts = merge_conflicts if merge_conflicts is not None else {}
        self._unmerged_files = unmerged_files if unmerged_files is not None else []
        self._branch_heads = branch_heads if branch_heads is not None else {}
        self._merged_branches = merged_branches if merged_branches is not None else {}

        # cwd -> source branch whose merge awaits a commit
        self._pending_merges: dict[Path, str] = {}
        self._pending_squashes: dict[Path, str] = {}

        # Mutation tracking
        self._merges: list[MergeRecord] = []
        self._commits: list[CommitRecord] = []
        self._merge_abort_calls = 0

    def merge(
        self,
        cwd: Path,
        source: str,
        *,
        no_ff: bool,
        squash: bool,
        no_verify: bool,
        message: str | None,
    ) -> GitCommandResult:
        target = self._current_branches.get(cwd)
        self._merges.append(
            MergeRecord(
                source=source,
                target=target,
                no_ff=no_ff,
                squash=squash,
                no_verify=no_verify,
                message=message,
            )
        )

        key = (source, target or "")
        if key in self._merge_conflicts:
            files = self._merge_conflicts.pop(key)
            self._unmerged_files.extend(files)
            if squash:
                self._pending_squashes[cwd] = source
            else:
                self._pending_merges[cwd] = source
            return GitCommandResult(returncode=1, output=conflict_output(files))

        if squash:
            self._pending_squashes[cwd] = source
            return GitCommandResult(
                returncode=0, output="Squash commit -- not updating HEAD\n"
            )
        if target is not None:
            advance_branch(self._branch_heads, self._merged_branches, target, integrated=source)
        return GitCommandResult(returncode=0, output="Merge made by the 'ort' strategy.\n")

    def merge_abort(self, cwd: Path) -> None:
        self._merge_abort_calls += 1
        self._unmerged_files.clear()
        self._pending_merges.pop(cwd, None)
        self._pending_squashes.pop(cwd, None)

    def commit(self, cwd: Path, message: str, *, no_verify: bool) -> GitCommandResult:
        if self._unmerged_files:
            return GitCommandResult(
                returncode=1,
                output="error: Committing is not possible because you have unmerged files.",
            )
        if cwd not in self._pending_merges and cwd not in self._pending_squashes:
            return GitCommandResult(returncode=1, output="nothing to commit, working tree clean")

        merged = self._pending_merges.pop(cwd, None)
        self._pending_squashes.pop(cwd, None)
        branch = self._current_branches.get(cwd)
        if branch is not None:
            advance_branch(self._branch_heads, self._merged_branches, branch, integrated=merged)
        self._commits.append(CommitRecord(branch=branch, message=message, no_verify=no_verify))
        return GitCommandResult(returncode=0, output="")

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_unmerged_files(self, cwd: Path) -> list[str]:
        return list(self._unmerged_files)

    def is_merge_in_progress(self, cwd: Path) -> bool:
        return cwd in self._pending_merges

    def has_staged_changes(self, cwd: Path) -> bool:
        return cwd in self._pending_merges or cwd in self._pending_squashes

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def merges(self) -> list[MergeRecord]:
        return self._merges.copy()

    @property
    def commits(self) -> list[CommitRecord]:
        return self._commits.copy()

    @property
    def merge_abort_calls(self) -> int:
        return self._merge_abort_calls
