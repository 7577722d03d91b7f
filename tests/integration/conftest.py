"""Helpers for tests that drive a real git binary."""

import os
import subprocess
from pathlib import Path

import pytest

from branchflow.core.context import FlowContext
from branchflow.gateway.git.real import RealGit
from branchflow.gateway.hooks.real import RealHookRunner


def git(repo: Path, *args: str) -> str:
    """Run a git command in repo and return its stripped stdout."""
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def init_git_repo(repo: Path, default_branch: str) -> None:
    """Initialize a repository with one commit on default_branch."""
    git(repo, "init", "-b", default_branch)
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")
    (repo / "README.md").write_text("# Test\n", encoding="utf-8")
    git(repo, "add", "README.md")
    git(repo, "commit", "-m", "Initial commit")


def commit_file(repo: Path, path: str, content: str, message: str) -> None:
    (repo / path).write_text(content, encoding="utf-8")
    git(repo, "add", path)
    git(repo, "commit", "-m", message)


def write_hook(repo: Path, name: str, body: str) -> Path:
    """Install an executable shell script in .git/hooks."""
    script = repo / ".git" / "hooks" / name
    script.parent.mkdir(parents=True, exist_ok=True)
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(0o755)
    return script


def real_context(repo: Path) -> FlowContext:
    return FlowContext.for_test(git=RealGit(), hook_runner=RealHookRunner(), cwd=repo)


@pytest.fixture
def repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A fresh repository on main, isolated from the user's git config."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    path = (tmp_path / "repo").resolve()
    path.mkdir()
    init_git_repo(path, "main")
    return path
