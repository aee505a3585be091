"""
Git Monitor Service - Unified facade for the synchronization engine.

This service provides a single entry point for:
- Fleet status polling
- Commit-and-push with generated commit messages
- Plain pulls
- CI/deploy status lookups
- Remote URL helpers
"""

import logging
from typing import List, Optional

from gitmonitor.common.config.settings import MonitorConfig
from gitmonitor.models.types import (
    CommitPushResult,
    DeployStatus,
    GitOperationResult,
    RepoSnapshot,
    RepositoryRef,
)
from gitmonitor.services.git.commit_push import CommitPushOrchestrator
from gitmonitor.services.git.fleet_poller import FleetPoller, SnapshotCallback
from gitmonitor.services.git.process_runner import ProcessRunner
from gitmonitor.services.git.status_checker import RepoStatusChecker, repository_exists
from gitmonitor.services.github.api.checks import DeployStatusResolver
from gitmonitor.services.github.repository.url_parser import to_browser_url
from gitmonitor.services.openai.commit_message_service import CommitMessageGenerator

logger = logging.getLogger(__name__)


class GitMonitorService:
    """
    Unified service providing all repository synchronization functionality.

    Holds no status between calls; callers own the snapshots it returns.
    """

    def __init__(
        self,
        config: MonitorConfig,
        runner: Optional[ProcessRunner] = None,
        message_generator: Optional[CommitMessageGenerator] = None,
    ):
        """Initialize the service.

        Args:
            config: Repositories, polling interval and credentials
            runner: Process runner shared by all git operations
            message_generator: Commit message generator
        """
        self.config = config
        self.runner = runner or ProcessRunner()

        self.checker = RepoStatusChecker(runner=self.runner)
        self.poller = FleetPoller(checker=self.checker)
        self.orchestrator = CommitPushOrchestrator(
            runner=self.runner,
            message_generator=message_generator or CommitMessageGenerator(),
            api_key=config.openai_api_key,
        )
        self.deploy_resolver = DeployStatusResolver(
            github_token=config.github_token, runner=self.runner
        )

    @property
    def repositories(self) -> List[RepositoryRef]:
        return self.config.repository_refs()

    async def check_repositories(self) -> List[RepoSnapshot]:
        """Status of every configured repository, in configuration order."""
        return await self.poller.poll(self.repositories)

    async def watch_repositories(
        self, on_snapshots: SnapshotCallback, cycles: Optional[int] = None
    ) -> None:
        """Poll all repositories every ``interval_seconds``."""
        await self.poller.watch(
            self.repositories,
            interval_seconds=self.config.interval_seconds,
            on_snapshots=on_snapshots,
            cycles=cycles,
        )

    async def commit_and_push(self, local_path: str) -> CommitPushResult:
        return await self.orchestrator.commit_and_push(local_path)

    async def pull(self, local_path: str) -> GitOperationResult:
        return await self.orchestrator.pull(local_path)

    async def check_deploy_status(self, local_path: str) -> DeployStatus:
        return await self.deploy_resolver.resolve(local_path)

    async def is_repository(self, local_path: str) -> bool:
        """Whether a folder is a git working tree (used before adding it)."""
        return await repository_exists(local_path)

    @staticmethod
    def browser_url(remote_url: str) -> str:
        return to_browser_url(remote_url)
