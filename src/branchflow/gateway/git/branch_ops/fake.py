"""Fake Git branch operations for testing."""

from __future__ import annotations

from pathlib import Path

from branchflow.gateway.git.branch_ops.abc import GitBranchOps


def advance_branch(
    branch_heads: dict[str, str],
    merged_branches: dict[str, set[str]],
    branch: str,
    *,
    integrated: str | None = None,
) -> None:
    """Move `branch` to a new fake commit, optionally one containing `integrated`.

    Shared by the merge and rebase fakes so that a completed merge, commit or
    rebase is visible to get_branch_head() and is_ancestor().
    """
    _, _, number = branch_heads.get(branch, "").rpartition("@")
    generation = int(number) + 1 if number.isdigit() else 1
    branch_heads[branch] = f"{branch}@{generation}"
    if integrated is not None:
        contained = merged_branches.setdefault(branch, set())
        contained.add(integrated)
        contained.update(merged_branches.get(integrated, set()))


class FakeGitBranchOps(GitBranchOps):
    """In-memory fake implementation of Git branch operations.

    State Management:
    -----------------
    This fake maintains mutable state to simulate git's stateful behavior.
    Operations like create_branch and checkout_branch modify internal state.
    When used through FakeGit, the containers passed in are shared with the
    other sub-gateways so that a checkout is visible to a subsequent merge.

    Each branch has a fake head (`<branch>@<n>`) that advance_branch() moves
    forward; merged_branches records which branches each one contains.

    Mutation Tracking:
    -----------------
    - created_branches: (branch_name, start_point) from create_branch()
    - checked_out_branches: Branch names from checkout_branch()
    - deleted_branches: (branch_name, force) from delete_branch()
    - renamed_branches: (old_name, new_name) from rename_branch()
    - created_tracking_branches: (branch, remote_ref) from create_tracking_branch()
    """

    def __init__(
        self,
        *,
        current_branches: dict[Path, str | None] | None = None,
        local_branches: list[str] | None = None,
        upstream_branches: dict[str, str] | None = None,
        left_right_counts: dict[tuple[str, str], tuple[int, int]] | None = None,
        branch_heads: dict[str, str] | None = None,
        merged_branches: dict[str, set[str]] | None = None,
        checkout_errors: dict[str, str] | None = None,
    ) -> None:
        """Create FakeGitBranchOps with pre-configured state.

        Args:
            current_branches: Mapping of cwd -> current branch (updated by checkout)
            local_branches: Local branch names
            upstream_branches: Mapping of branch -> tracking ref (e.g., 'origin/develop')
            left_right_counts: Mapping of (left, right) -> (left-only, right-only)
            branch_heads: Mapping of branch -> fake commit SHA
            merged_branches: Mapping of branch -> branches whose commits it contains
            checkout_errors: Mapping of branch -> error raised by the next checkout
              of that branch (consumed once, like a dirty working tree that the
              user then cleans up)
        """
        self._current_branches = current_branches if current_branches is not None else {}
        self._local_branches = local_branches if local_branches is not None else []
        self._upstream_branches = upstream_branches if upstream_branches is not None else {}
        self._left_right_counts = left_right_counts if left_right_counts is not None else {}
        self._branch_heads = branch_heads if branch_heads is not None else {}
        self._merged_branches = merged_branches if merged_branches is not None else {}
        self._checkout_errors = checkout_errors if checkout_errors is not None else {}

        # Mutation tracking
        self._created_branches: list[tuple[str, str]] = []
        self._checked_out_branches: list[str] = []
        self._deleted_branches: list[tuple[str, bool]] = []
        self._renamed_branches: list[tuple[str, str]] = []
        self._created_tracking_branches: list[tuple[str, str]] = []

    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        if branch_name in self._local_branches:
            raise RuntimeError(f"fatal: a branch named '{branch_name}' already exists")
        self._local_branches.append(branch_name)
        self._created_branches.append((branch_name, start_point))

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        if branch not in self._local_branches:
            raise RuntimeError(f"error: pathspec '{branch}' did not match any file(s) known to git")
        if branch in self._checkout_errors:
            raise RuntimeError(self._checkout_errors.pop(branch))
        self._current_branches[cwd] = branch
        self._checked_out_branches.append(branch)

    def delete_branch(self, cwd: Path, branch_name: str, *, force: bool) -> None:
        if branch_name in self._local_branches:
            self._local_branches.remove(branch_name)
        self._deleted_branches.append((branch_name, force))

    def rename_branch(self, cwd: Path, old_name: str, new_name: str) -> None:
        if old_name not in self._local_branches:
            raise RuntimeError(f"error: refname refs/heads/{old_name} not found")
        index = self._local_branches.index(old_name)
        self._local_branches[index] = new_name
        for path, branch in self._current_branches.items():
            if branch == old_name:
                self._current_branches[path] = new_name
        self._renamed_branches.append((old_name, new_name))

    def create_tracking_branch(self, cwd: Path, branch: str, remote_ref: str) -> None:
        self._local_branches.append(branch)
        self._upstream_branches[branch] = remote_ref
        self._current_branches[cwd] = branch
        self._created_tracking_branches.append((branch, remote_ref))

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branches.get(cwd)

    def branch_exists(self, cwd: Path, branch: str) -> bool:
        return branch in self._local_branches

    def list_local_branches(self, cwd: Path) -> list[str]:
        return list(self._local_branches)

    def get_upstream_branch(self, cwd: Path, branch: str) -> str | None:
        return self._upstream_branches.get(branch)

    def count_left_right(self, cwd: Path, left: str, right: str) -> tuple[int, int]:
        return self._left_right_counts.get((left, right), (0, 0))

    def get_branch_head(self, cwd: Path, branch: str) -> str | None:
        if branch not in self._local_branches:
            return None
        return self._branch_heads.get(branch, f"{branch}@0")

    def is_ancestor(self, cwd: Path, ancestor: str, descendant: str) -> bool:
        return ancestor == descendant or ancestor in self._merged_branches.get(descendant, set())

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def created_branches(self) -> list[tuple[str, str]]:
        """Branches created during test as (branch_name, start_point) tuples.

        This property is for test assertions only.
        """
        return self._created_branches.copy()

    @property
    def checked_out_branches(self) -> list[str]:
        return self._checked_out_branches.copy()

    @property
    def deleted_branches(self) -> list[tuple[str, bool]]:
        """Branches deleted during test as (branch_name, force) tuples."""
        return self._deleted_branches.copy()

    @property
    def renamed_branches(self) -> list[tuple[str, str]]:
        return self._renamed_branches.copy()

    @property
    def created_tracking_branches(self) -> list[tuple[str, str]]:
        return self._created_tracking_branches.copy()
