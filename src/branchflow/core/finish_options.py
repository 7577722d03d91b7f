"""Three-layer option resolution for finishing a topic branch.

Precedence, lowest to highest:

1. The topic type's branch config (tag, tag prefix, upstream strategy)
2. Command config in git: `gitflow.<type>.finish.<option>`
3. Command-line flags

A CLI flag left at None defers to the lower layers.
"""

from dataclasses import dataclass, replace
from pathlib import Path

from branchflow.core.topology import BranchConfig, FlowConfig, MergeStrategy


@dataclass(frozen=True)
class FinishFlags:
    """Command-line values for finish; None means "not given"."""

    tag: bool | None = None
    sign: bool | None = None
    signing_key: str | None = None
    message: str | None = None
    message_file: str | None = None
    tag_name: str | None = None
    keep: bool | None = None
    keep_remote: bool | None = None
    keep_local: bool | None = None
    force_delete: bool | None = None
    rebase: bool | None = None
    squash: bool | None = None
    preserve_merges: bool | None = None
    no_ff: bool | None = None
    squash_message: str | None = None
    merge_message: str | None = None
    update_message: str | None = None
    fetch: bool | None = None
    no_verify: bool | None = None


# Flags that steer the steps after the upstream merge; they are stored in the
# operation record so a bare --continue finishes the way the paused run would.
PERSISTED_FLAGS = (
    "tag",
    "sign",
    "signing_key",
    "message",
    "message_file",
    "tag_name",
    "keep",
    "keep_remote",
    "keep_local",
    "force_delete",
    "no_ff",
    "preserve_merges",
)


def flags_to_persist(flags: FinishFlags) -> dict[str, str | bool]:
    return {
        name: getattr(flags, name)
        for name in PERSISTED_FLAGS
        if getattr(flags, name) is not None
    }


def restore_flags(flags: FinishFlags, stored: dict[str, str | bool]) -> FinishFlags:
    """Fill the flags not given on --continue from the ones stored at the pause."""
    restored = {
        name: value
        for name, value in stored.items()
        if name in PERSISTED_FLAGS and getattr(flags, name) is None
    }
    return replace(flags, **restored)


@dataclass(frozen=True)
class ResolvedFinishOptions:
    should_tag: bool
    tag_name: str
    sign: bool
    signing_key: str | None
    tag_message: str
    message_file: Path | None
    keep_remote: bool
    keep_local: bool
    force_delete: bool
    strategy: MergeStrategy
    no_ff: bool
    preserve_merges: bool
    squash_message: str | None
    merge_message: str | None
    update_message: str | None
    fetch: bool
    no_verify: bool


def _layered_bool(config_value: bool | None, flag: bool | None, default: bool) -> bool:
    if flag is not None:
        return flag
    if config_value is not None:
        return config_value
    return default


def resolve_strategy(
    config: FlowConfig, topic: BranchConfig, flags: FinishFlags
) -> MergeStrategy:
    """Strategy for merging the topic branch into its parent.

    `--no-rebase` / `--no-squash` only undo a rebase / squash chosen by a
    lower layer; they fall back to a plain merge.
    """
    strategy: MergeStrategy = topic.upstream_strategy

    if config.command_flag(topic.name, "finish", "rebase"):
        strategy = "rebase"
    if config.command_flag(topic.name, "finish", "squash"):
        strategy = "squash"

    if flags.rebase is True:
        strategy = "rebase"
    elif flags.rebase is False and strategy == "rebase":
        strategy = "merge"

    if flags.squash is True:
        strategy = "squash"
    elif flags.squash is False and strategy == "squash":
        strategy = "merge"

    return strategy


def resolve_finish_options(
    config: FlowConfig, topic: BranchConfig, short: str, flags: FinishFlags
) -> ResolvedFinishOptions:
    """Resolve every finish option for topic branch `short` of type `topic`."""
    branch_type = topic.name

    def config_flag(option: str) -> bool | None:
        return config.command_flag(branch_type, "finish", option)

    def config_value(option: str) -> str | None:
        value = config.command_option(branch_type, "finish", option)
        return value or None

    should_tag = topic.tag
    if config_flag("notag"):
        should_tag = False
    if flags.tag is not None:
        should_tag = flags.tag

    tag_name = flags.tag_name or f"{topic.tag_prefix}{short}"
    message_file = flags.message_file or config_value("messagefile")

    keep = _layered_bool(config_flag("keep"), flags.keep, default=False)
    keep_remote = _layered_bool(config_flag("keepremote"), flags.keep_remote, default=False)
    keep_local = _layered_bool(config_flag("keeplocal"), flags.keep_local, default=False)

    return ResolvedFinishOptions(
        should_tag=should_tag,
        tag_name=tag_name,
        sign=_layered_bool(config_flag("sign"), flags.sign, default=False),
        signing_key=flags.signing_key or config_value("signingkey"),
        tag_message=flags.message or f"Tagging version {short}",
        message_file=Path(message_file) if message_file else None,
        keep_remote=keep or keep_remote,
        keep_local=keep or keep_local,
        force_delete=_layered_bool(config_flag("force-delete"), flags.force_delete, default=False),
        strategy=resolve_strategy(config, topic, flags),
        no_ff=_layered_bool(config_flag("no-ff"), flags.no_ff, default=True),
        preserve_merges=_layered_bool(
            config_flag("preserve-merges"), flags.preserve_merges, default=False
        ),
        squash_message=flags.squash_message,
        merge_message=flags.merge_message,
        update_message=flags.update_message,
        fetch=_layered_bool(config_flag("fetch"), flags.fetch, default=False),
        no_verify=_layered_bool(config_flag("no-verify"), flags.no_verify, default=False),
    )
