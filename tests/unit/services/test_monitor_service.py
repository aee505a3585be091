"""Tests for the GitMonitorService facade."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from gitmonitor.common.config.settings import MonitorConfig
from gitmonitor.models.types import DeployState, SyncState
from gitmonitor.services.monitor_service import GitMonitorService
from gitmonitor.services.openai.commit_message_service import CommitMessageGenerator
from tests.fixtures.git_fixtures import ScriptedGitRunner, make_fake_repo, ok_result


@pytest.fixture
def runner():
    return ScriptedGitRunner(
        {
            ("status", "--porcelain"): ok_result(" M a.py\n"),
            ("rev-parse", "--abbrev-ref", "HEAD"): ok_result("main\n"),
            ("rev-list",): ok_result("1\t0\n"),
            ("config", "--get"): ok_result("git@github.com:acme/widget.git\n"),
        }
    )


def make_config(tmp_path, **overrides):
    repos = [
        {"name": "Widget", "path": str(make_fake_repo(tmp_path, "widget"))},
        {"name": "Gadget", "path": str(make_fake_repo(tmp_path, "gadget"))},
    ]
    return MonitorConfig(repos=repos, **overrides)


class TestGitMonitorService:
    """Test the facade wiring."""

    @pytest.mark.asyncio
    async def test_check_repositories(self, tmp_path, runner):
        service = GitMonitorService(make_config(tmp_path), runner=runner)

        snapshots = await service.check_repositories()

        assert [s.ref.display_name for s in snapshots] == ["Widget", "Gadget"]
        assert all(s.status.state is SyncState.DIRTY_AHEAD for s in snapshots)
        assert snapshots[0].remote_url == "git@github.com:acme/widget.git"

    @pytest.mark.asyncio
    async def test_watch_uses_configured_interval(self, tmp_path, runner):
        service = GitMonitorService(make_config(tmp_path, interval_seconds=5), runner=runner)
        service.poller.watch = AsyncMock()
        callback = AsyncMock()

        await service.watch_repositories(callback, cycles=2)

        kwargs = service.poller.watch.await_args.kwargs
        assert kwargs["interval_seconds"] == 5
        assert kwargs["cycles"] == 2
        assert kwargs["on_snapshots"] is callback

    @pytest.mark.asyncio
    async def test_commit_and_push_uses_configured_key(self, tmp_path, runner):
        generator = MagicMock(spec=CommitMessageGenerator)
        generator.generate = AsyncMock(side_effect=AssertionError("not reached"))
        service = GitMonitorService(
            make_config(tmp_path, openai_api_key=""), runner=runner, message_generator=generator
        )

        result = await service.commit_and_push(str(tmp_path / "widget"))

        assert not result.ok
        assert result.stage.value == "require_credential"

    @pytest.mark.asyncio
    async def test_deploy_status_without_token(self, tmp_path, runner):
        service = GitMonitorService(make_config(tmp_path), runner=runner)

        status = await service.check_deploy_status(str(tmp_path / "widget"))

        assert status.state is DeployState.NO_TOKEN

    @pytest.mark.asyncio
    async def test_is_repository(self, tmp_path, runner):
        service = GitMonitorService(make_config(tmp_path), runner=runner)

        assert await service.is_repository(str(tmp_path / "widget"))
        assert not await service.is_repository(str(tmp_path))

    def test_browser_url(self):
        assert (
            GitMonitorService.browser_url("git@github.com:acme/widget.git")
            == "https://github.com/acme/widget"
        )
