"""Error kinds raised by branchflow operations.

Every error carries the process exit code the CLI should terminate with.
Configuration, existence and remote-state errors are raised before any
repository mutation. MergeConflictError is not a failure: it signals that an
operation paused on a conflict and can be resumed with --continue.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    NOT_INITIALIZED = 1
    INVALID_INPUT = 2
    GIT_ERROR = 3
    BRANCH_EXISTS = 4
    BRANCH_NOT_FOUND = 5
    VALIDATION_ERROR = 6
    PAUSED = 7


class FlowError(Exception):
    """Base class for all branchflow errors."""

    exit_code: int = ExitCode.GIT_ERROR


# ============================================================================
# Configuration
# ============================================================================


class ConfigurationError(FlowError):
    exit_code = ExitCode.VALIDATION_ERROR


class NotInitializedError(ConfigurationError):
    exit_code = ExitCode.NOT_INITIALIZED

    def __init__(self) -> None:
        super().__init__("git flow is not initialized (run 'branchflow init' first)")


class AlreadyInitializedError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__(
            "git-flow is already initialized in this repository. Use --force to reconfigure"
        )


class InvalidBranchTypeError(ConfigurationError):
    exit_code = ExitCode.INVALID_INPUT

    def __init__(self, branch_type: str) -> None:
        self.branch_type = branch_type
        super().__init__(f"unknown branch type: {branch_type}")


class CircularDependencyError(ConfigurationError):
    def __init__(self, branch_name: str, parent: str) -> None:
        self.branch_name = branch_name
        self.parent = parent
        super().__init__(
            f"circular dependency detected: making '{parent}' the parent of "
            f"'{branch_name}' would create a cycle"
        )


class BranchHasDependentsError(ConfigurationError):
    def __init__(self, branch_name: str, dependent: str) -> None:
        self.branch_name = branch_name
        self.dependent = dependent
        super().__init__(
            f"cannot delete branch '{branch_name}': branch '{dependent}' depends on it"
        )


class InvalidMergeStrategyError(ConfigurationError):
    exit_code = ExitCode.INVALID_INPUT

    def __init__(self, strategy: str) -> None:
        self.strategy = strategy
        super().__init__(
            f"invalid merge strategy: {strategy} (valid options: merge, rebase, squash, none)"
        )


# ============================================================================
# Input and existence
# ============================================================================


class EmptyBranchNameError(FlowError):
    exit_code = ExitCode.INVALID_INPUT

    def __init__(self) -> None:
        super().__init__("branch name cannot be empty")


class InvalidBranchNameError(FlowError):
    exit_code = ExitCode.INVALID_INPUT

    def __init__(self, branch_name: str, reason: str | None = None) -> None:
        self.branch_name = branch_name
        message = f"invalid branch name: {branch_name}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class BranchExistsError(FlowError):
    exit_code = ExitCode.BRANCH_EXISTS

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(f"branch '{branch_name}' already exists")


class RemoteBranchExistsError(FlowError):
    exit_code = ExitCode.BRANCH_EXISTS

    def __init__(self, remote: str, branch_name: str) -> None:
        self.remote = remote
        self.branch_name = branch_name
        super().__init__(f"branch '{branch_name}' already exists on remote '{remote}'")


class BranchNotFoundError(FlowError):
    exit_code = ExitCode.BRANCH_NOT_FOUND

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(f"branch '{branch_name}' does not exist")


class RemoteBranchNotFoundError(FlowError):
    exit_code = ExitCode.BRANCH_NOT_FOUND

    def __init__(self, remote: str, branch_name: str) -> None:
        self.remote = remote
        self.branch_name = branch_name
        super().__init__(f"branch '{branch_name}' not found on remote '{remote}'")


# ============================================================================
# Remote state
# ============================================================================


class RemoteStateError(FlowError):
    exit_code = ExitCode.VALIDATION_ERROR


class BranchBehindRemoteError(RemoteStateError):
    def __init__(
        self,
        *,
        branch_name: str,
        remote_branch: str,
        commit_count: int,
        branch_type: str,
        diverged: bool,
    ) -> None:
        self.branch_name = branch_name
        self.remote_branch = remote_branch
        self.commit_count = commit_count
        self.branch_type = branch_type
        self.diverged = diverged
        relation = "has diverged from" if diverged else "is behind"
        super().__init__(
            f"branch '{branch_name}' {relation} '{remote_branch}' "
            f"({commit_count} commit(s))\n"
            f"Update it first with 'git pull' or 'branchflow {branch_type} update', "
            f"or use --force to finish anyway"
        )


# ============================================================================
# Operation state
# ============================================================================


class MergeInProgressError(FlowError):
    exit_code = ExitCode.NOT_INITIALIZED

    def __init__(self, branch_name: str, action: str = "finish") -> None:
        self.branch_name = branch_name
        self.action = action
        super().__init__(
            f"a {action} operation is already in progress for branch '{branch_name}'. "
            "Use --continue or --abort"
        )


class NoMergeInProgressError(FlowError):
    exit_code = ExitCode.NOT_INITIALIZED

    def __init__(self) -> None:
        super().__init__("no merge in progress. Nothing to continue or abort")


class UnresolvedConflictsError(FlowError):
    exit_code = ExitCode.NOT_INITIALIZED

    def __init__(self) -> None:
        super().__init__("there are still unresolved conflicts. Resolve them and try again")


class MergeConflictError(FlowError):
    """The operation paused on a conflict; state was saved for --continue."""

    exit_code = ExitCode.PAUSED

    def __init__(self, report: str) -> None:
        self.report = report
        super().__init__(report)


# ============================================================================
# Collaborators
# ============================================================================


class HookRejectionError(FlowError):
    def __init__(self, hook_name: str, exit_code: int, output: str) -> None:
        self.hook_name = hook_name
        self.hook_exit_code = exit_code
        self.output = output
        message = f"pre-hook '{hook_name}' failed with exit code {exit_code}"
        if output:
            message += f":\n{output}"
        super().__init__(message)


class FilterFailureError(FlowError):
    def __init__(self, filter_name: str, detail: str) -> None:
        self.filter_name = filter_name
        self.detail = detail
        super().__init__(f"filter '{filter_name}' failed: {detail}")


class GitOperationError(FlowError):
    """An unexpected failure reported by the git backend."""

    def __init__(self, operation: str, detail: str | None = None) -> None:
        self.operation = operation
        self.detail = detail
        message = f"failed to {operation}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


@contextmanager
def wrap_git_errors(operation: str) -> Iterator[None]:
    """Re-raise gateway RuntimeErrors as GitOperationError for `operation`."""
    try:
        yield
    except RuntimeError as e:
        raise GitOperationError(operation, str(e)) from e
