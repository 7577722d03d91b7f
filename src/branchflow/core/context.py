"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

import click

from branchflow.core.config_store import load_flow_config
from branchflow.core.hooks import FlowHooks, resolve_hooks_dir
from branchflow.core.operation_state import OperationStateStore
from branchflow.core.topology import FlowConfig
from branchflow.errors import GitOperationError, NotInitializedError
from branchflow.gateway.git.abc import Git
from branchflow.gateway.git.real import RealGit
from branchflow.gateway.hooks.abc import HookRunner
from branchflow.gateway.hooks.real import RealHookRunner
from branchflow.output import user_output


@dataclass(frozen=True)
class RepoContext:
    """The repository a command operates on.

    Attributes:
        root: Working tree root; every git command runs here
        git_dir: This worktree's git directory, home of the operation state
    """

    root: Path
    git_dir: Path


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository."""

    message: str = "not a git repository (run 'git init' first)"


@dataclass(frozen=True)
class FlowContext:
    """Immutable context holding all dependencies for branchflow operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    hook_runner: HookRunner
    cwd: Path  # Current working directory at CLI invocation
    repo: RepoContext | NoRepoSentinel

    def require_repo(self) -> RepoContext:
        if isinstance(self.repo, NoRepoSentinel):
            raise GitOperationError("locate git repository", self.repo.message)
        return self.repo

    def load_config(self) -> FlowConfig:
        """Load the configuration snapshot for this command."""
        return load_flow_config(self.git, self.require_repo().root)

    def load_initialized_config(self) -> FlowConfig:
        config = self.load_config()
        if not config.initialized:
            raise NotInitializedError()
        return config

    def state_store(self) -> OperationStateStore:
        return OperationStateStore(self.require_repo().git_dir)

    def hooks(self) -> FlowHooks:
        repo = self.require_repo()
        hooks_dir = resolve_hooks_dir(self.git, repo.root, repo.root)
        return FlowHooks(self.hook_runner, hooks_dir, repo.root)

    @staticmethod
    def for_test(
        git: Git | None = None,
        hook_runner: HookRunner | None = None,
        cwd: Path | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
    ) -> "FlowContext":
        """Create test context with optional pre-configured gateways.

        Args:
            git: Optional Git implementation. If None, creates an empty FakeGit
                rooted at cwd.
            hook_runner: Optional HookRunner. If None, creates a FakeHookRunner
                with no scripts.
            cwd: Optional current working directory. If None, uses
                Path("/test/default/cwd").
            repo: Optional RepoContext or NoRepoSentinel. If None, derived from
                the git gateway's view of cwd.

        Example:
            >>> git = FakeGit(repo_root=tmp_path, current_branches={tmp_path: "develop"})
            >>> ctx = FlowContext.for_test(git=git, cwd=tmp_path)
        """
        from branchflow.gateway.git.fake import FakeGit
        from branchflow.gateway.hooks.fake import FakeHookRunner

        if cwd is None:
            cwd = Path("/test/default/cwd")
        if git is None:
            git = FakeGit(repo_root=cwd)
        if hook_runner is None:
            hook_runner = FakeHookRunner()
        if repo is None:
            root = git.repo.get_repository_root(cwd)
            if root is None:
                repo = NoRepoSentinel()
            else:
                repo = RepoContext(root=root, git_dir=git.repo.get_git_dir(root))

        return FlowContext(git=git, hook_runner=hook_runner, cwd=cwd, repo=repo)


def create_context() -> FlowContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.
    """
    try:
        cwd = Path.cwd()
    except FileNotFoundError:
        user_output(click.style("Error: ", fg="red") + "the current directory no longer exists")
        raise SystemExit(1) from None

    git: Git = RealGit()
    root = git.repo.get_repository_root(cwd)
    repo: RepoContext | NoRepoSentinel
    if root is None:
        repo = NoRepoSentinel()
    else:
        repo = RepoContext(root=root, git_dir=git.repo.get_git_dir(root))

    return FlowContext(git=git, hook_runner=RealHookRunner(), cwd=cwd, repo=repo)
