"""
Shared types and models for repository synchronization.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    TOOL_FAILURE = "tool_failure"
    MISSING_CREDENTIAL = "missing_credential"
    GENERATION_FAILED = "generation_failed"
    NETWORK_FAILURE = "network_failure"
    AUTHORIZATION_FAILURE = "authorization_failure"
    UNCLASSIFIED = "unclassified"


class SyncState(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIRTY_AHEAD = "dirty-ahead"
    ERROR = "error"


class DeployState(str, Enum):
    NO_TOKEN = "no-token"
    SUCCESS = "success"
    PENDING = "pending"
    FAILURE = "failure"
    NONE = "none"
    ERROR = "error"


class PushStage(str, Enum):
    CHECK_STATUS = "check_status"
    REQUIRE_CREDENTIAL = "require_credential"
    GENERATE_MESSAGE = "generate_message"
    STAGE = "stage"
    COMMIT = "commit"
    PULL_REBASE = "pull_rebase"
    PUSH = "push"
    DONE = "done"


@dataclass(frozen=True)
class RepositoryRef:
    display_name: str
    local_path: str


@dataclass(frozen=True)
class SyncStatus:
    """
    Synchronization state of one repository relative to its remote.

    Exactly one ``state`` holds. Use the class-method constructors, they
    enforce the count invariants of each variant.

    Attributes:
        state: Variant tag.
        changed_files: Modified/untracked files (DIRTY, DIRTY_AHEAD).
        ahead: Local commits not on the remote (AHEAD, DIRTY_AHEAD).
        behind: Remote commits not pulled yet (BEHIND; informational elsewhere).
        reason: Error summary (ERROR only).
        error_kind: Error classification (ERROR only).
    """

    state: SyncState
    changed_files: int = 0
    ahead: int = 0
    behind: int = 0
    reason: str = ""
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def clean(cls) -> "SyncStatus":
        return cls(SyncState.CLEAN)

    @classmethod
    def dirty(cls, changed_files: int, behind: int = 0) -> "SyncStatus":
        _require_positive("changed_files", changed_files)
        return cls(SyncState.DIRTY, changed_files=changed_files, behind=behind)

    @classmethod
    def ahead_of_remote(cls, ahead: int, behind: int = 0) -> "SyncStatus":
        _require_positive("ahead", ahead)
        return cls(SyncState.AHEAD, ahead=ahead, behind=behind)

    @classmethod
    def behind_remote(cls, behind: int) -> "SyncStatus":
        _require_positive("behind", behind)
        return cls(SyncState.BEHIND, behind=behind)

    @classmethod
    def dirty_ahead(cls, changed_files: int, ahead: int, behind: int = 0) -> "SyncStatus":
        _require_positive("changed_files", changed_files)
        _require_positive("ahead", ahead)
        return cls(
            SyncState.DIRTY_AHEAD,
            changed_files=changed_files,
            ahead=ahead,
            behind=behind,
        )

    @classmethod
    def error(
        cls, reason: str, error_kind: ErrorKind = ErrorKind.UNCLASSIFIED
    ) -> "SyncStatus":
        return cls(SyncState.ERROR, reason=reason, error_kind=error_kind)

    @property
    def is_error(self) -> bool:
        return self.state is SyncState.ERROR

    def describe(self) -> str:
        """Short human-readable summary of the state."""
        if self.state is SyncState.DIRTY_AHEAD:
            return f"{self.changed_files} file(s) modified, {self.ahead} not pushed"
        if self.state is SyncState.DIRTY:
            return f"{self.changed_files} file(s) modified"
        if self.state is SyncState.AHEAD:
            return f"{self.ahead} commit(s) to push"
        if self.state is SyncState.BEHIND:
            return f"{self.behind} commit(s) to pull"
        if self.state is SyncState.ERROR:
            return self.reason
        return "In sync"


def _require_positive(name: str, value: int) -> None:
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")


@dataclass(frozen=True)
class RepoSnapshot:
    ref: RepositoryRef
    status: SyncStatus
    branch: str = ""
    remote_url: str = ""


@dataclass(frozen=True)
class CommitDraft:
    title: str
    body: str = ""


@dataclass(frozen=True)
class DeployStatus:
    """CI/deploy outcome for the current commit of a repository."""

    state: DeployState
    detail: str = ""
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def no_token(cls) -> "DeployStatus":
        return cls(DeployState.NO_TOKEN)

    @classmethod
    def success(cls) -> "DeployStatus":
        return cls(DeployState.SUCCESS)

    @classmethod
    def pending(cls, detail: str = "") -> "DeployStatus":
        return cls(DeployState.PENDING, detail=detail)

    @classmethod
    def failure(cls, detail: str = "") -> "DeployStatus":
        return cls(DeployState.FAILURE, detail=detail)

    @classmethod
    def none(cls) -> "DeployStatus":
        return cls(DeployState.NONE)

    @classmethod
    def error(
        cls, detail: str, error_kind: ErrorKind = ErrorKind.UNCLASSIFIED
    ) -> "DeployStatus":
        return cls(DeployState.ERROR, detail=detail, error_kind=error_kind)


@dataclass(frozen=True)
class CommitPushResult:
    ok: bool
    stage: PushStage
    title: str = ""
    body: str = ""
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class GitOperationResult:
    success: bool
    message: str
    error: Optional[str] = None
