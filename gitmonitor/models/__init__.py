"""
Value types shared by the synchronization services.
"""

from gitmonitor.models.types import (
    CommitDraft,
    CommitPushResult,
    DeployState,
    DeployStatus,
    ErrorKind,
    GitOperationResult,
    PushStage,
    RepoSnapshot,
    RepositoryRef,
    SyncState,
    SyncStatus,
)

__all__ = [
    "CommitDraft",
    "CommitPushResult",
    "DeployState",
    "DeployStatus",
    "ErrorKind",
    "GitOperationResult",
    "PushStage",
    "RepoSnapshot",
    "RepositoryRef",
    "SyncState",
    "SyncStatus",
]
