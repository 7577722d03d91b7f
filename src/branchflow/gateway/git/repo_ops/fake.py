"""Fake implementation of repository-level Git operations."""

from __future__ import annotations

from pathlib import Path

from branchflow.gateway.git.repo_ops.abc import GitRepoOps


class FakeGitRepoOps(GitRepoOps):
    """In-memory fake implementation of repository operations.

    Constructor Injection:
    ---------------------
    - repo_root: Reported repository root, or None to simulate "not a repo"
    - git_dir: Reported git directory; tests that persist operation state
      point this at a tmp_path
    - has_commits: Whether HEAD resolves (flipped by create_initial_commit)

    Mutation Tracking:
    -----------------
    - initial_commits: Messages passed to create_initial_commit()
    """

    def __init__(
        self,
        *,
        repo_root: Path | None = None,
        git_dir: Path | None = None,
        has_commits: bool = True,
    ) -> None:
        self._repo_root = repo_root
        self._git_dir = git_dir
        self._has_commits = has_commits
        self._initial_commits: list[str] = []

    def create_initial_commit(self, cwd: Path, message: str) -> None:
        self._has_commits = True
        self._initial_commits.append(message)

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._repo_root

    def get_git_dir(self, cwd: Path) -> Path:
        if self._git_dir is not None:
            return self._git_dir
        root = self._repo_root if self._repo_root is not None else cwd
        return root / ".git"

    def get_git_common_dir(self, cwd: Path) -> Path:
        return self.get_git_dir(cwd)

    def has_commits(self, cwd: Path) -> bool:
        return self._has_commits

    @property
    def initial_commits(self) -> list[str]:
        return self._initial_commits.copy()
