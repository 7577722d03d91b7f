"""Text printed when a finish or update pauses on a conflict."""

from branchflow.core.operation_state import MergeOperationState

_DONE = "✓"
_CONFLICT = "✗"
_PENDING = "⧖"

_STEPS_AFTER_MERGE = frozenset({"create_tag", "update_children", "delete_branch"})


def _child_parent(state: MergeOperationState, child: str) -> str:
    return state.child_parents.get(child) or state.parent_branch


def _what_happened(state: MergeOperationState) -> list[str]:
    if state.action == "update":
        return [
            f"  Trying to update '{state.full_branch_name}' from '{state.parent_branch}' "
            f"using {state.merge_strategy} strategy"
        ]
    if state.current_step == "merge":
        return [
            f"  Trying to merge '{state.full_branch_name}' into '{state.parent_branch}' "
            f"using {state.merge_strategy} strategy"
        ]
    child = state.current_child_branch
    strategy = state.child_strategies.get(child) or "merge"
    return [
        f"  Successfully merged '{state.full_branch_name}' into '{state.parent_branch}'",
        f"  Now updating '{child}' from '{_child_parent(state, child)}' using {strategy} strategy",
    ]


def _where_we_are(state: MergeOperationState, tag_name: str | None) -> list[str]:
    if state.action == "update":
        return [
            f"  {_DONE} Started update operation",
            f"  {_CONFLICT} Update {state.full_branch_name} from {state.parent_branch} "
            "(conflict here)",
        ]

    lines = [f"  {_DONE} Started finish operation"]
    merged = state.current_step in _STEPS_AFTER_MERGE
    if merged:
        lines.append(f"  {_DONE} Merged into {state.parent_branch}")
    else:
        lines.append(f"  {_CONFLICT} Merge into {state.parent_branch} (conflict here)")

    if tag_name:
        if merged:
            lines.append(f"  {_DONE} Created tag '{tag_name}'")
        else:
            lines.append(f"  {_PENDING} Create tag '{tag_name}'")

    for child in state.child_branches:
        parent = _child_parent(state, child)
        if child in state.updated_branches:
            lines.append(f"  {_DONE} Update {child} from {parent}")
        elif state.current_step == "update_children" and state.current_child_branch == child:
            lines.append(f"  {_CONFLICT} Update {child} from {parent} (conflict here)")
        else:
            lines.append(f"  {_PENDING} Update {child} from {parent}")

    lines.append(f"  {_PENDING} Delete {state.branch_type} branch")
    return lines


def format_conflict_report(
    state: MergeOperationState, files: list[str] | tuple[str, ...], *, tag_name: str | None = None
) -> str:
    """Describe a paused operation and how to resume or abort it.

    Args:
        state: The persisted record at the moment of the pause
        files: Paths git reports as unmerged
        tag_name: Tag the finish will create, shown as a step when set
    """
    verb = "updating" if state.action == "update" else "finishing"
    lines = [f"Merge conflict detected while {verb} {state.full_branch_name}", ""]

    if files:
        lines.append("Conflicting files:")
        lines.extend(f"  {path}" for path in files)
        lines.append("")

    lines.append("What happened:")
    lines.extend(_what_happened(state))
    lines.append("")
    lines.append("Where we are:")
    lines.extend(_where_we_are(state, tag_name))
    lines.append("")

    if state.action == "update":
        command = f"branchflow update {state.full_branch_name}"
    else:
        command = f"branchflow {state.branch_type} finish {state.branch_name}"

    lines.extend(
        [
            "To continue:",
            "  1. Resolve the conflicts in your files",
            "  2. Stage resolved files: git add <files>",
            f"  3. Continue: {command} --continue",
            "",
            f"To abort: {command} --abort",
        ]
    )
    return "\n".join(lines)
