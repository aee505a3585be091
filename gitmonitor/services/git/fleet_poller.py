"""Concurrent status polling over all configured repositories."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from gitmonitor.common.config.config import STATUS_ERROR_MAX_CHARS
from gitmonitor.common.utils.text import truncate
from gitmonitor.models.types import ErrorKind, RepoSnapshot, RepositoryRef, SyncStatus
from gitmonitor.services.git.status_checker import RepoProbe, RepoStatusChecker

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[List[RepoSnapshot]], Awaitable[None]]


class FleetPoller:
    """Runs one status check per repository, all at once."""

    def __init__(self, checker: Optional[RepoStatusChecker] = None):
        self.checker = checker or RepoStatusChecker()

    async def poll(self, refs: Sequence[RepositoryRef]) -> List[RepoSnapshot]:
        """Check every repository concurrently.

        One repository failing or hanging never cancels the others; each
        check is bounded by the per-command timeouts of the runner.

        Args:
            refs: Repositories in configuration order

        Returns:
            One snapshot per ref, in the same order
        """
        probes = await asyncio.gather(
            *(self.checker.check(ref.local_path) for ref in refs),
            return_exceptions=True,
        )

        snapshots = []
        for ref, probe in zip(refs, probes):
            if isinstance(probe, BaseException):
                if not isinstance(probe, Exception):
                    raise probe
                logger.error(f"Status check crashed for {ref.local_path}: {probe}")
                probe = RepoProbe(
                    status=SyncStatus.error(
                        truncate(str(probe) or type(probe).__name__, STATUS_ERROR_MAX_CHARS),
                        ErrorKind.UNCLASSIFIED,
                    )
                )
            snapshots.append(
                RepoSnapshot(
                    ref=ref,
                    status=probe.status,
                    branch=probe.branch,
                    remote_url=probe.remote_url,
                )
            )

        errors = sum(1 for s in snapshots if s.status.is_error)
        logger.info(f"Polled {len(snapshots)} repositories ({errors} with errors)")
        return snapshots

    async def watch(
        self,
        refs: Sequence[RepositoryRef],
        interval_seconds: float,
        on_snapshots: SnapshotCallback,
        cycles: Optional[int] = None,
    ) -> None:
        """Poll repeatedly, handing each fleet result to ``on_snapshots``.

        Args:
            refs: Repositories in configuration order
            interval_seconds: Pause between the end of one poll and the next
            on_snapshots: Async callback receiving each result
            cycles: Number of polls before returning (None runs until cancelled)
        """
        completed = 0
        while cycles is None or completed < cycles:
            snapshots = await self.poll(refs)
            await on_snapshots(snapshots)
            completed += 1
            if cycles is None or completed < cycles:
                await asyncio.sleep(interval_seconds)
