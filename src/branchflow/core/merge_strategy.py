"""Integrate one branch into another with a configured strategy.

The executor is the only place that interprets strategy names. It never
raises on conflicts: apply() and resume() return a MergeOutcome that the
orchestrator turns into progress, a pause, or an error.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from branchflow.core.topology import MergeStrategy
from branchflow.errors import GitOperationError
from branchflow.gateway.git.abc import Git, GitCommandResult

logger = logging.getLogger(__name__)

RebaseDirection = Literal["topic", "branch"]

_CONFLICT_MARKERS = ("Automatic merge failed", "CONFLICT", "merge failed", "needs merge")
_REBASE_CONFLICT_MARKERS = (*_CONFLICT_MARKERS, "could not apply", "Resolve all conflicts")


def default_merge_message(source: str, target: str) -> str:
    return f"Merge branch '{source}' into {target}"


def default_squash_message(source: str) -> str:
    return f"Squashed commit of branch '{source}'"


def default_child_squash_message(child: str, parent: str) -> str:
    return f"Update {child}: squashed changes from {parent}"


@dataclass(frozen=True)
class MergeOptions:
    """How to integrate a branch.

    Attributes:
        no_ff: Always create a merge commit
        no_verify: Skip commit hooks on every commit-producing step
        message: Merge commit message; defaults to "Merge branch '<source>' into <target>"
        squash_message: Squash commit message; defaults to "Squashed commit of branch '<source>'"
        preserve_merges: Rebase with --rebase-merges
        rebase_direction: "topic" rebases source onto target then merges it in;
            "branch" rebases target onto source
    """

    no_ff: bool = True
    no_verify: bool = False
    message: str | None = None
    squash_message: str | None = None
    preserve_merges: bool = False
    rebase_direction: RebaseDirection = "topic"


@dataclass(frozen=True)
class MergeSuccess:
    pass


@dataclass(frozen=True)
class MergeConflict:
    files: tuple[str, ...]
    output: str = ""


@dataclass(frozen=True)
class MergeFatal:
    message: str


MergeOutcome = MergeSuccess | MergeConflict | MergeFatal


class MergeStrategyExecutor:
    """Runs merge, rebase and squash integrations in one working tree."""

    def __init__(self, git: Git, cwd: Path) -> None:
        self._git = git
        self._cwd = cwd

    def apply(
        self, strategy: MergeStrategy, source: str, target: str, options: MergeOptions
    ) -> MergeOutcome:
        """Integrate `source` into `target`."""
        logger.debug("Applying %s: %s -> %s (%s)", strategy, source, target, options)
        if strategy == "none":
            return MergeSuccess()
        if strategy == "merge":
            return self._merge(source, target, options)
        if strategy == "squash":
            return self._squash(source, target, options)
        if strategy == "rebase":
            return self._rebase(source, target, options)
        return MergeFatal(f"unknown merge strategy: {strategy}")

    def resume(
        self,
        strategy: MergeStrategy,
        source: str,
        target: str,
        options: MergeOptions,
        *,
        target_head: str,
    ) -> MergeOutcome:
        """Finish an integration that stopped on a conflict the user has resolved.

        With nothing left in progress the step is checked against the
        repository: if `source` did not land in `target` (the user backed the
        merge out, or the step failed before it started) it is applied again.

        Args:
            target_head: SHA `target` had before the step started; a squash
                counts as landed once `target` has moved past it
        """
        logger.debug("Resuming %s: %s -> %s", strategy, source, target)
        if strategy == "none":
            return MergeSuccess()
        if strategy == "rebase" and self._git.rebase.is_rebase_in_progress(self._cwd):
            return self._resume_rebase(source, target, options)

        if self._has_pending_commit(target):
            if strategy == "squash":
                message = options.squash_message or default_squash_message(source)
            else:
                message = options.message or default_merge_message(source, target)
            return self._commit(message, options)

        try:
            landed = self._is_integrated(strategy, source, target, target_head)
        except RuntimeError as e:
            return MergeFatal(str(e))
        if landed:
            # The user already committed the resolution themselves
            return MergeSuccess()

        logger.info("'%s' has not landed in '%s'; applying %s again", source, target, strategy)
        return self.apply(strategy, source, target, options)

    def abort(self, strategy: MergeStrategy) -> None:
        """Abort the in-progress merge or rebase left by a paused step."""
        try:
            if strategy == "rebase":
                if self._git.rebase.is_rebase_in_progress(self._cwd):
                    self._git.rebase.rebase_abort(self._cwd)
            elif strategy != "none":
                self._git.merge.merge_abort(self._cwd)
        except RuntimeError as e:
            raise GitOperationError(f"abort {strategy}", str(e)) from e

    # ============================================================================
    # Strategies
    # ============================================================================

    def _merge(self, source: str, target: str, options: MergeOptions) -> MergeOutcome:
        fatal = self._checkout(target)
        if fatal is not None:
            return fatal
        result = self._git.merge.merge(
            self._cwd,
            source,
            no_ff=options.no_ff,
            squash=False,
            no_verify=options.no_verify,
            message=options.message or default_merge_message(source, target),
        )
        return self._classify(result, _CONFLICT_MARKERS)

    def _squash(self, source: str, target: str, options: MergeOptions) -> MergeOutcome:
        fatal = self._checkout(target)
        if fatal is not None:
            return fatal
        result = self._git.merge.merge(
            self._cwd,
            source,
            no_ff=False,
            squash=True,
            no_verify=options.no_verify,
            message=None,
        )
        outcome = self._classify(result, _CONFLICT_MARKERS)
        if not isinstance(outcome, MergeSuccess):
            return outcome
        result = self._git.merge.commit(
            self._cwd,
            options.squash_message or default_squash_message(source),
            no_verify=options.no_verify,
        )
        if not result.success and "nothing to commit" in result.output:
            # The topic branch adds nothing the target lacks
            return MergeSuccess()
        return self._classify(result, _CONFLICT_MARKERS)

    def _rebase(self, source: str, target: str, options: MergeOptions) -> MergeOutcome:
        if options.rebase_direction == "branch":
            fatal = self._checkout(target)
            if fatal is not None:
                return fatal
            result = self._git.rebase.rebase(
                self._cwd, source, rebase_merges=options.preserve_merges
            )
            return self._classify(result, _REBASE_CONFLICT_MARKERS)

        fatal = self._checkout(source)
        if fatal is not None:
            return fatal
        result = self._git.rebase.rebase(self._cwd, target, rebase_merges=options.preserve_merges)
        outcome = self._classify(result, _REBASE_CONFLICT_MARKERS)
        if not isinstance(outcome, MergeSuccess):
            return outcome
        return self._merge(source, target, options)

    def _resume_rebase(self, source: str, target: str, options: MergeOptions) -> MergeOutcome:
        result = self._git.rebase.rebase_continue(self._cwd)
        outcome = self._classify(result, _REBASE_CONFLICT_MARKERS)
        if not isinstance(outcome, MergeSuccess):
            return outcome
        if options.rebase_direction == "topic":
            return self._merge(source, target, options)
        return MergeSuccess()

    # ============================================================================
    # Helpers
    # ============================================================================

    def _checkout(self, branch: str) -> MergeFatal | None:
        try:
            self._git.branch.checkout_branch(self._cwd, branch)
        except RuntimeError as e:
            return MergeFatal(str(e))
        return None

    def _commit(self, message: str, options: MergeOptions) -> MergeOutcome:
        result = self._git.merge.commit(self._cwd, message, no_verify=options.no_verify)
        return self._classify(result, _CONFLICT_MARKERS)

    def _has_pending_commit(self, target: str) -> bool:
        """Whether `target` is checked out with a merge or squash waiting to be committed."""
        if self._git.branch.get_current_branch(self._cwd) != target:
            return False
        return self._git.merge.is_merge_in_progress(self._cwd) or self._git.merge.has_staged_changes(
            self._cwd
        )

    def _is_integrated(
        self, strategy: MergeStrategy, source: str, target: str, target_head: str
    ) -> bool:
        if strategy == "squash":
            if not target_head:
                return False
            return self._git.branch.get_branch_head(self._cwd, target) != target_head
        return self._git.branch.is_ancestor(self._cwd, source, target)

    def _classify(self, result: GitCommandResult, markers: tuple[str, ...]) -> MergeOutcome:
        if result.success:
            return MergeSuccess()
        unmerged = self._git.merge.get_unmerged_files(self._cwd)
        if unmerged or any(marker in result.output for marker in markers):
            return MergeConflict(files=tuple(unmerged), output=result.output)
        return MergeFatal(result.output.strip() or f"git exited with code {result.returncode}")
