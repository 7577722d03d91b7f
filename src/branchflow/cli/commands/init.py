"""Init command: write the branch topology and create the base branches."""

from pathlib import Path

import click

from branchflow.cli.ensure import Ensure
from branchflow.core.config_store import PRESETS, apply_overrides, preset_config
from branchflow.core.context import FlowContext
from branchflow.core.init_flow import init_flow
from branchflow.core.topology import base_branches, topic_types
from branchflow.gateway.git.config_ops.types import LOCAL_SCOPE, ConfigScope
from branchflow.output import user_output

_PREFIX_OPTIONS = ("feature", "bugfix", "release", "hotfix", "support")


def _resolve_scope(
    *, local: bool, global_: bool, system: bool, file: Path | None
) -> ConfigScope:
    Ensure.at_most_one(
        {"local": local, "global": global_, "system": system, "file": file is not None},
        "--local, --global, --system and --file are mutually exclusive",
    )
    if global_:
        return ConfigScope(level="global")
    if system:
        return ConfigScope(level="system")
    if file is not None:
        return ConfigScope(level="file", file=file)
    return LOCAL_SCOPE


@click.command("init")
@click.option(
    "--preset",
    type=click.Choice(PRESETS),
    default=None,
    help="Branch topology to start from (default: classic).",
)
@click.option(
    "-d",
    "--defaults",
    is_flag=True,
    help="Use the preset unchanged apart from the options given (init never prompts).",
)
@click.option("--main", "main_branch", help="Name of the production branch.")
@click.option("--develop", "develop_branch", help="Name of the integration branch.")
@click.option("--feature", "feature_prefix", help="Prefix of feature branches.")
@click.option("--bugfix", "bugfix_prefix", help="Prefix of bugfix branches.")
@click.option("--release", "release_prefix", help="Prefix of release branches.")
@click.option("--hotfix", "hotfix_prefix", help="Prefix of hotfix branches.")
@click.option("--support", "support_prefix", help="Prefix of support branches.")
@click.option("--tag", "tag_prefix", help="Prefix of version tags.")
@click.option(
    "--no-create-branches",
    "no_create_branches",
    is_flag=True,
    help="Only write the configuration; do not create missing base branches.",
)
@click.option("-f", "--force", is_flag=True, help="Reconfigure an initialized repository.")
@click.option("--local", is_flag=True, help="Write to the repository config (default).")
@click.option("--global", "global_", is_flag=True, help="Write to the global config.")
@click.option("--system", is_flag=True, help="Write to the system config.")
@click.option(
    "--file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to the given config file.",
)
@click.pass_obj
def init_cmd(
    ctx: FlowContext,
    *,
    preset: str | None,
    defaults: bool,
    main_branch: str | None,
    develop_branch: str | None,
    feature_prefix: str | None,
    bugfix_prefix: str | None,
    release_prefix: str | None,
    hotfix_prefix: str | None,
    support_prefix: str | None,
    tag_prefix: str | None,
    no_create_branches: bool,
    force: bool,
    local: bool,
    global_: bool,
    system: bool,
    file: Path | None,
) -> None:
    """Initialize git-flow in this repository.

    Writes the branch topology to git config and creates the base branches
    that do not exist yet, parents first. An empty repository gets an
    initial commit.
    """
    scope = _resolve_scope(local=local, global_=global_, system=system, file=file)

    prefixes = {
        name: value
        for name, value in zip(
            _PREFIX_OPTIONS,
            (feature_prefix, bugfix_prefix, release_prefix, hotfix_prefix, support_prefix),
            strict=True,
        )
        if value
    }
    config = apply_overrides(
        preset_config(preset or "classic"),
        main_branch=main_branch,
        develop_branch=develop_branch,
        prefixes=prefixes,
        tag_prefix=tag_prefix,
    )

    init_flow(ctx, config, scope=scope, force=force, create_branches=not no_create_branches)

    user_output(f"Base branches: {', '.join(b.name for b in base_branches(config))}")
    topics = ", ".join(f"{t.name} ({t.prefix})" for t in topic_types(config))
    user_output(f"Topic types:   {topics}")
