"""
Local git operations: process execution, status checks, fleet polling and
commit-and-push.
"""

from gitmonitor.services.git.commit_push import CommitPushOrchestrator
from gitmonitor.services.git.fleet_poller import FleetPoller
from gitmonitor.services.git.process_runner import (
    GitCommandError,
    ProcessFailure,
    ProcessResult,
    ProcessRunner,
)
from gitmonitor.services.git.status_checker import (
    RepoProbe,
    RepoStatusChecker,
    classify_sync_status,
)

__all__ = [
    "CommitPushOrchestrator",
    "FleetPoller",
    "GitCommandError",
    "ProcessFailure",
    "ProcessResult",
    "ProcessRunner",
    "RepoProbe",
    "RepoStatusChecker",
    "classify_sync_status",
]
