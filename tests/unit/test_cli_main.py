"""Tests for the git-monitor command line."""

from unittest.mock import AsyncMock, patch

import pytest

from gitmonitor.__main__ import build_parser, format_snapshot, main
from gitmonitor.models.types import (
    CommitPushResult,
    DeployStatus,
    ErrorKind,
    GitOperationResult,
    PushStage,
    RepoSnapshot,
    RepositoryRef,
    SyncStatus,
)


@pytest.fixture
def service():
    with patch("gitmonitor.__main__.load_monitor_config"), patch(
        "gitmonitor.__main__.GitMonitorService"
    ) as service_cls:
        yield service_cls.return_value


class TestParser:
    def test_path_commands_require_path(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["push"])

    def test_status_watch_flag(self):
        args = build_parser().parse_args(["--config", "/tmp/c.json", "status", "--watch"])

        assert args.command == "status"
        assert args.watch is True
        assert args.config == "/tmp/c.json"


class TestMain:
    """Test command dispatch and exit codes."""

    def test_status_prints_each_repository(self, service, capsys):
        service.check_repositories = AsyncMock(
            return_value=[
                RepoSnapshot(
                    ref=RepositoryRef(display_name="Widget", local_path="/r/widget"),
                    status=SyncStatus.dirty(2),
                    branch="main",
                )
            ]
        )

        assert main(["status"]) == 0
        assert "Widget [main]: dirty - 2 file(s) modified" in capsys.readouterr().out

    def test_push_success(self, service, capsys):
        service.commit_and_push = AsyncMock(
            return_value=CommitPushResult(ok=True, stage=PushStage.DONE, title="Add feature")
        )

        assert main(["push", "/r/widget"]) == 0
        service.commit_and_push.assert_awaited_once_with("/r/widget")
        assert "Pushed: Add feature" in capsys.readouterr().out

    def test_push_failure_exit_code(self, service, capsys):
        service.commit_and_push = AsyncMock(
            return_value=CommitPushResult(
                ok=False,
                stage=PushStage.PUSH,
                error_kind=ErrorKind.TOOL_FAILURE,
                error="rejected",
            )
        )

        assert main(["push", "/r/widget"]) == 1
        assert "Push failed at push: rejected" in capsys.readouterr().out

    def test_pull_failure_exit_code(self, service):
        service.pull = AsyncMock(
            return_value=GitOperationResult(success=False, message="Pull failed", error="conflict")
        )

        assert main(["pull", "/r/widget"]) == 1

    def test_deploy_prints_state(self, service, capsys):
        service.check_deploy_status = AsyncMock(return_value=DeployStatus.failure("build"))

        assert main(["deploy", "/r/widget"]) == 0
        assert "failure - build" in capsys.readouterr().out


def test_format_snapshot_without_branch():
    snapshot = RepoSnapshot(
        ref=RepositoryRef(display_name="Gone", local_path="/r/gone"),
        status=SyncStatus.error("repository not found"),
    )

    assert format_snapshot(snapshot) == "Gone: error - repository not found"
