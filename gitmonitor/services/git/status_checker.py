"""Repository synchronization status.

Computes one repository's state relative to its remote:

1. Validate the path and its .git metadata (no git call when missing).
2. Start ``git fetch`` in the background.
3. Read porcelain status and current branch concurrently with the fetch.
4. Join the fetch, then count ahead/behind against the remote branch.
5. Read the remote URL (best effort) and classify.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from gitmonitor.common.config.config import (
    FETCH_TIMEOUT_SECONDS,
    GIT_REMOTE_NAME,
    READ_PROBE_TIMEOUT_SECONDS,
    REMOTE_URL_TIMEOUT_SECONDS,
    STATUS_ERROR_MAX_CHARS,
)
from gitmonitor.common.utils.text import truncate
from gitmonitor.models.types import ErrorKind, SyncStatus
from gitmonitor.services.git.process_runner import GitCommandError, ProcessRunner

logger = logging.getLogger(__name__)

REPOSITORY_NOT_FOUND_MSG = "repository not found"


@dataclass(frozen=True)
class RepoProbe:
    """Result of one status check."""

    status: SyncStatus
    branch: str = ""
    remote_url: str = ""


def classify_sync_status(changed_files: int, ahead: int, behind: int) -> SyncStatus:
    """Pick the single state for a set of counts.

    Precedence (first match wins): changes and ahead, changes, ahead,
    behind, clean.
    """
    if changed_files > 0 and ahead > 0:
        return SyncStatus.dirty_ahead(changed_files, ahead, behind=behind)
    if changed_files > 0:
        return SyncStatus.dirty(changed_files, behind=behind)
    if ahead > 0:
        return SyncStatus.ahead_of_remote(ahead, behind=behind)
    if behind > 0:
        return SyncStatus.behind_remote(behind)
    return SyncStatus.clean()


def count_changed_files(porcelain_output: str) -> int:
    """Number of entries in ``git status --porcelain`` output."""
    return len([line for line in porcelain_output.splitlines() if line.strip()])


def parse_left_right_count(output: str) -> Tuple[int, int]:
    """Parse ``rev-list --left-right --count`` output into (ahead, behind)."""
    parts = output.split()
    try:
        return max(int(parts[0]), 0), max(int(parts[1]), 0)
    except (IndexError, ValueError):
        return 0, 0


async def repository_exists(path: str) -> bool:
    """Check that path is a directory holding git metadata."""

    def _check() -> bool:
        return os.path.isdir(path) and os.path.exists(os.path.join(path, ".git"))

    return await asyncio.to_thread(_check)


class RepoStatusChecker:
    """Computes the SyncStatus of a single repository."""

    def __init__(self, runner: Optional[ProcessRunner] = None):
        self.runner = runner or ProcessRunner()

    async def check_status(self, local_path: str) -> SyncStatus:
        return (await self.check(local_path)).status

    async def check(self, local_path: str) -> RepoProbe:
        """Check one repository. Never raises.

        Args:
            local_path: Repository working directory

        Returns:
            RepoProbe with the status, current branch and remote URL
        """
        if not await repository_exists(local_path):
            logger.info(f"Repository not found: {local_path}")
            return RepoProbe(
                status=SyncStatus.error(REPOSITORY_NOT_FOUND_MSG, ErrorKind.NOT_FOUND)
            )

        try:
            return await self._probe(local_path)
        except GitCommandError as e:
            logger.warning(f"Status check failed for {local_path}: {e}")
            return RepoProbe(
                status=SyncStatus.error(
                    truncate(str(e), STATUS_ERROR_MAX_CHARS), e.error_kind
                )
            )
        except Exception as e:
            logger.error(f"Unexpected error checking {local_path}: {e}")
            return RepoProbe(
                status=SyncStatus.error(
                    truncate(str(e) or type(e).__name__, STATUS_ERROR_MAX_CHARS),
                    ErrorKind.UNCLASSIFIED,
                )
            )

    async def _probe(self, local_path: str) -> RepoProbe:
        fetch_task = asyncio.create_task(
            self.runner.run_git(
                ["fetch", "--quiet"], cwd=local_path, timeout=FETCH_TIMEOUT_SECONDS
            )
        )
        try:
            status_result, branch_result = await asyncio.gather(
                self.runner.run_git(
                    ["status", "--porcelain"],
                    cwd=local_path,
                    timeout=READ_PROBE_TIMEOUT_SECONDS,
                ),
                self.runner.run_git(
                    ["rev-parse", "--abbrev-ref", "HEAD"],
                    cwd=local_path,
                    timeout=READ_PROBE_TIMEOUT_SECONDS,
                ),
            )
        finally:
            # Join point: ahead/behind is only meaningful after the remote refresh.
            fetch_result = await fetch_task

        if not fetch_result.ok:
            logger.debug(f"Fetch failed for {local_path}: {fetch_result.message}")
        if not status_result.ok:
            raise GitCommandError(status_result)
        if not branch_result.ok:
            raise GitCommandError(branch_result)

        branch = branch_result.stdout.strip()
        changed_files = count_changed_files(status_result.stdout)

        (ahead, behind), remote_url = await asyncio.gather(
            self._ahead_behind(local_path, branch),
            read_remote_url(self.runner, local_path),
        )

        status = classify_sync_status(changed_files, ahead, behind)
        logger.debug(f"{local_path}: {status.state.value} ({status.describe()})")
        return RepoProbe(status=status, branch=branch, remote_url=remote_url)

    async def _ahead_behind(self, local_path: str, branch: str) -> Tuple[int, int]:
        result = await self.runner.run_git(
            [
                "rev-list",
                "--left-right",
                "--count",
                f"{branch}...{GIT_REMOTE_NAME}/{branch}",
            ],
            cwd=local_path,
            timeout=READ_PROBE_TIMEOUT_SECONDS,
        )
        if not result.ok:
            return 0, 0
        return parse_left_right_count(result.stdout)


async def read_remote_url(runner: ProcessRunner, local_path: str) -> str:
    """Configured remote URL, or an empty string when there is none."""
    result = await runner.run_git(
        ["config", "--get", f"remote.{GIT_REMOTE_NAME}.url"],
        cwd=local_path,
        timeout=REMOTE_URL_TIMEOUT_SECONDS,
    )
    return result.stdout.strip() if result.ok else ""
