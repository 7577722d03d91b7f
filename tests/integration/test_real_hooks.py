"""Hook and filter scripts run by a real repository."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from branchflow.cli.cli import cli
from branchflow.errors import ExitCode
from tests.integration.conftest import commit_file, git, real_context, write_hook

pytestmark = pytest.mark.integration


@pytest.fixture
def flow_repo(repo: Path) -> Path:
    result = CliRunner().invoke(cli, ["init", "--defaults"], obj=real_context(repo))
    assert result.exit_code == 0, result.output
    return repo


def test_pre_hook_vetoes_start(flow_repo: Path) -> None:
    write_hook(flow_repo, "pre-flow-feature-start", 'echo "no features on Fridays"\nexit 1')

    result = CliRunner().invoke(cli, ["feature", "start", "login"], obj=real_context(flow_repo))

    assert result.exit_code == ExitCode.GIT_ERROR
    assert "no features on Fridays" in result.output
    assert git(flow_repo, "branch", "--list", "feature/login") == ""


def test_pre_hook_receives_arguments(flow_repo: Path) -> None:
    log = flow_repo / "hook.log"
    write_hook(flow_repo, "pre-flow-feature-start", f'echo "$@ $BRANCH_TYPE" > "{log}"')

    result = CliRunner().invoke(cli, ["feature", "start", "login"], obj=real_context(flow_repo))

    assert result.exit_code == 0, result.output
    assert log.read_text(encoding="utf-8").strip() == "login origin feature/login develop feature"


def test_post_hook_gets_exit_code(flow_repo: Path) -> None:
    log = flow_repo / "post.log"
    write_hook(flow_repo, "post-flow-feature-finish", f'echo "$EXIT_CODE $BRANCH" > "{log}"')
    ctx = real_context(flow_repo)
    runner = CliRunner()
    runner.invoke(cli, ["feature", "start", "login"], obj=ctx)
    commit_file(flow_repo, "login.py", "login\n", "Login")

    result = runner.invoke(cli, ["feature", "finish"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert log.read_text(encoding="utf-8").strip() == "0 feature/login"


def test_version_filter_renames_release(flow_repo: Path) -> None:
    write_hook(flow_repo, "filter-flow-release-start-version", 'echo "$1.0"')

    result = CliRunner().invoke(cli, ["release", "start", "2"], obj=real_context(flow_repo))

    assert result.exit_code == 0, result.output
    assert git(flow_repo, "branch", "--show-current") == "release/2.0"


def test_failing_filter_stops_start(flow_repo: Path) -> None:
    write_hook(flow_repo, "filter-flow-release-start-version", 'echo "bad version" >&2\nexit 3')

    result = CliRunner().invoke(cli, ["release", "start", "2"], obj=real_context(flow_repo))

    assert result.exit_code == ExitCode.GIT_ERROR
    assert "filter 'filter-flow-release-start-version' failed: exit code 3: bad version" in (
        result.output
    )


def test_tag_message_filter(flow_repo: Path) -> None:
    write_hook(flow_repo, "filter-flow-release-finish-tag-message", 'echo "Release $1"')
    ctx = real_context(flow_repo)
    runner = CliRunner()
    runner.invoke(cli, ["release", "start", "1.2"], obj=ctx)
    commit_file(flow_repo, "CHANGES", "1.2\n", "Changes for 1.2")

    result = runner.invoke(cli, ["release", "finish"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git(flow_repo, "tag", "-l", "--format=%(contents:subject)", "1.2") == "Release 1.2"
