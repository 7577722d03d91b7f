"""Persisted record of an in-progress finish or update.

The record lives at `<git-dir>/gitflow/state/merge.json` and doubles as an
advisory lock: while it exists, no other start, finish or update may begin.
It is written before the first mutation and rewritten at every step
boundary, so a conflict at any point leaves enough information for
--continue and --abort in a later process.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal

from branchflow.core.topology import MergeStrategy
from branchflow.errors import MergeInProgressError

logger = logging.getLogger(__name__)

OperationAction = Literal["start", "finish", "update"]
OperationStep = Literal["merge", "create_tag", "update_children", "delete_branch"]


@dataclass(frozen=True)
class MergeOperationState:
    """Everything needed to resume or abort a paused operation.

    `updated_branches` is always an ordered subset of
    `child_branches`; `current_child_branch` names the child whose update
    is in flight, or "" when none is.

    `target_head` is the SHA the branch being integrated into had before the
    step in flight started, so a resume can tell whether that step already
    landed. `finish_flags` keeps the tag and retention flags of the finish
    invocation that started the operation.
    """

    action: OperationAction
    branch_type: str
    branch_name: str
    full_branch_name: str
    parent_branch: str
    merge_strategy: MergeStrategy
    current_step: OperationStep = "merge"
    child_branches: tuple[str, ...] = ()
    updated_branches: tuple[str, ...] = ()
    current_child_branch: str = ""
    child_strategies: dict[str, MergeStrategy] = field(default_factory=dict)
    child_parents: dict[str, str] = field(default_factory=dict)
    squash_message: str = ""
    merge_message: str = ""
    update_message: str = ""
    no_verify: bool = False
    target_head: str = ""
    finish_flags: dict[str, str | bool] = field(default_factory=dict)

    def with_step(self, step: OperationStep) -> "MergeOperationState":
        return replace(self, current_step=step)

    def with_current_child(self, child: str, *, target_head: str) -> "MergeOperationState":
        return replace(
            self,
            current_step="update_children",
            current_child_branch=child,
            target_head=target_head,
        )

    def with_child_updated(self, child: str) -> "MergeOperationState":
        updated = self.updated_branches
        if child not in updated:
            updated = (*updated, child)
        return replace(self, updated_branches=updated, current_child_branch="")

    def pending_children(self) -> list[str]:
        return [child for child in self.child_branches if child not in self.updated_branches]


def state_to_dict(state: MergeOperationState) -> dict[str, object]:
    return {
        "action": state.action,
        "branchType": state.branch_type,
        "branchName": state.branch_name,
        "fullBranchName": state.full_branch_name,
        "currentStep": state.current_step,
        "parentBranch": state.parent_branch,
        "mergeStrategy": state.merge_strategy,
        "childBranches": list(state.child_branches),
        "updatedBranches": list(state.updated_branches),
        "currentChildBranch": state.current_child_branch,
        "childStrategies": dict(state.child_strategies),
        "childParents": dict(state.child_parents),
        "squashMessage": state.squash_message,
        "mergeMessage": state.merge_message,
        "updateMessage": state.update_message,
        "noVerify": state.no_verify,
        "targetHead": state.target_head,
        "finishFlags": dict(state.finish_flags),
    }


def state_from_dict(data: dict) -> MergeOperationState:
    """Build a state record, tolerating missing optional keys and ignoring unknown ones."""
    return MergeOperationState(
        action=data.get("action", "finish"),
        branch_type=data.get("branchType", ""),
        branch_name=data.get("branchName", ""),
        full_branch_name=data.get("fullBranchName", ""),
        parent_branch=data.get("parentBranch", ""),
        merge_strategy=data.get("mergeStrategy", "merge"),
        current_step=data.get("currentStep", "merge"),
        child_branches=tuple(data.get("childBranches") or []),
        updated_branches=tuple(data.get("updatedBranches") or []),
        current_child_branch=data.get("currentChildBranch") or "",
        child_strategies=dict(data.get("childStrategies") or {}),
        child_parents=dict(data.get("childParents") or {}),
        squash_message=data.get("squashMessage") or "",
        merge_message=data.get("mergeMessage") or "",
        update_message=data.get("updateMessage") or "",
        no_verify=bool(data.get("noVerify", False)),
        target_head=data.get("targetHead") or "",
        finish_flags=dict(data.get("finishFlags") or {}),
    )


class OperationStateStore:
    """Reads and writes the operation record under a git directory."""

    def __init__(self, git_dir: Path) -> None:
        self._path = git_dir / "gitflow" / "state" / "merge.json"

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> MergeOperationState | None:
        if not self._path.exists():
            return None
        data = json.loads(self._path.read_text(encoding="utf-8"))
        return state_from_dict(data)

    def save(self, state: MergeOperationState) -> None:
        """Write the record atomically.

        A reader sees the old or the new record, never a torn one.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(state_to_dict(state), indent=2)

        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=".merge-", suffix=".json.tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(
            "Saved operation state for %s: step=%s child=%s",
            state.full_branch_name,
            state.current_step,
            state.current_child_branch or "-",
        )

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        logger.debug("Cleared operation state")


def ensure_no_operation_in_progress(store: OperationStateStore) -> None:
    """Refuse to start a new operation while another one is paused."""
    state = store.load()
    if state is not None:
        raise MergeInProgressError(state.full_branch_name, state.action)
