"""Fake implementation of Git remote operations for testing."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

from branchflow.gateway.git.remote_ops.abc import GitRemoteOps


class PushedBranch(NamedTuple):
    """Record of a branch push operation."""

    remote: str
    branch: str
    set_upstream: bool
    push_options: list[str]


class FakeGitRemoteOps(GitRemoteOps):
    """In-memory fake implementation of Git remote operations.

    Constructor Injection:
    ---------------------
    - remote_branches: Remote-tracking refs as '<remote>/<branch>'
    - upstream_branches: Shared branch -> tracking ref mapping, updated by
      pushes with set_upstream
    - fetch_raises: Exception raised by every fetch
    - push_raises: Exception raised by every push

    Mutation Tracking:
    -----------------
    - fetched_branches: (remote, branch) from fetch_branch()
    - fetched_remotes: Remote names from fetch_remote()
    - pushed_branches: PushedBranch records from push_branch()
    - deleted_remote_branches: (remote, branch) from delete_remote_branch()
    """

    def __init__(
        self,
        *,
        remote_branches: list[str] | None = None,
        upstream_branches: dict[str, str] | None = None,
        fetch_raises: Exception | None = None,
        push_raises: Exception | None = None,
    ) -> None:
        self._remote_branches = remote_branches if remote_branches is not None else []
        self._upstream_branches = upstream_branches if upstream_branches is not None else {}
        self._fetch_raises = fetch_raises
        self._push_raises = push_raises

        # Mutation tracking
        self._fetched_branches: list[tuple[str, str]] = []
        self._fetched_remotes: list[str] = []
        self._pushed_branches: list[PushedBranch] = []
        self._deleted_remote_branches: list[tuple[str, str]] = []

    def fetch_branch(self, cwd: Path, remote: str, branch: str) -> None:
        if self._fetch_raises is not None:
            raise self._fetch_raises
        self._fetched_branches.append((remote, branch))

    def fetch_remote(self, cwd: Path, remote: str) -> None:
        if self._fetch_raises is not None:
            raise self._fetch_raises
        self._fetched_remotes.append(remote)

    def push_branch(
        self,
        cwd: Path,
        remote: str,
        branch: str,
        *,
        set_upstream: bool,
        push_options: list[str],
    ) -> None:
        if self._push_raises is not None:
            raise self._push_raises
        self._pushed_branches.append(
            PushedBranch(
                remote=remote,
                branch=branch,
                set_upstream=set_upstream,
                push_options=list(push_options),
            )
        )
        remote_ref = f"{remote}/{branch}"
        if remote_ref not in self._remote_branches:
            self._remote_branches.append(remote_ref)
        if set_upstream:
            self._upstream_branches[branch] = remote_ref

    def delete_remote_branch(self, cwd: Path, remote: str, branch: str) -> None:
        if self._push_raises is not None:
            raise self._push_raises
        remote_ref = f"{remote}/{branch}"
        if remote_ref in self._remote_branches:
            self._remote_branches.remove(remote_ref)
        self._deleted_remote_branches.append((remote, branch))

    # ============================================================================
    # Query Operations
    # ============================================================================

    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        return f"{remote}/{branch}" in self._remote_branches

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def fetched_branches(self) -> list[tuple[str, str]]:
        return self._fetched_branches.copy()

    @property
    def fetched_remotes(self) -> list[str]:
        return self._fetched_remotes.copy()

    @property
    def pushed_branches(self) -> list[PushedBranch]:
        return self._pushed_branches.copy()

    @property
    def deleted_remote_branches(self) -> list[tuple[str, str]]:
        return self._deleted_remote_branches.copy()
