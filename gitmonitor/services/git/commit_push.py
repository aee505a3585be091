"""Commit and push operations for monitored repositories.

Sequence for one repository:

    CHECK_STATUS -> (no changes) -> PULL_REBASE -> PUSH -> DONE
    CHECK_STATUS -> (changes) -> REQUIRE_CREDENTIAL -> GENERATE_MESSAGE
                 -> STAGE -> COMMIT -> PULL_REBASE -> PUSH -> DONE

Any stage can end the run with a failed CommitPushResult naming that stage.
A completed commit is never rolled back: a repository left committed but not
pushed shows up as ahead on the next poll.
"""

import logging
from typing import Optional

from gitmonitor.common.config.config import (
    COMMIT_TIMEOUT_SECONDS,
    DEFAULT_PUSH_TITLE,
    DIFF_TIMEOUT_SECONDS,
    OPERATION_ERROR_MAX_CHARS,
    READ_PROBE_TIMEOUT_SECONDS,
    STAGE_TIMEOUT_SECONDS,
    SYNC_TIMEOUT_SECONDS,
)
from gitmonitor.common.utils.text import truncate
from gitmonitor.models.types import (
    CommitDraft,
    CommitPushResult,
    ErrorKind,
    GitOperationResult,
    PushStage,
)
from gitmonitor.services.git.process_runner import ProcessResult, ProcessRunner
from gitmonitor.services.git.status_checker import (
    REPOSITORY_NOT_FOUND_MSG,
    repository_exists,
)
from gitmonitor.services.openai.commit_message_service import (
    CommitMessageError,
    CommitMessageGenerator,
)

logger = logging.getLogger(__name__)

NOTHING_TO_COMMIT_MSG = "nothing to commit"


def _failed(
    stage: PushStage,
    error_kind: ErrorKind,
    error: str,
    draft: Optional[CommitDraft] = None,
) -> CommitPushResult:
    logger.error(f"Commit and push failed at {stage.value}: {error}")
    return CommitPushResult(
        ok=False,
        stage=stage,
        title=draft.title if draft else "",
        body=draft.body if draft else "",
        error_kind=error_kind,
        error=truncate(error, OPERATION_ERROR_MAX_CHARS),
    )


def _failed_command(
    stage: PushStage, result: ProcessResult, draft: Optional[CommitDraft] = None
) -> CommitPushResult:
    return _failed(
        stage,
        result.error_kind or ErrorKind.TOOL_FAILURE,
        result.message or f"git {stage.value} failed",
        draft,
    )


class CommitPushOrchestrator:
    """Commits local changes (with a generated message) and pushes them."""

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        message_generator: Optional[CommitMessageGenerator] = None,
        api_key: str = "",
    ):
        """Initialize the orchestrator.

        Args:
            runner: Process runner for git commands
            message_generator: Commit message generator
            api_key: Inference API key; required only when there are changes
        """
        self.runner = runner or ProcessRunner()
        self.message_generator = message_generator or CommitMessageGenerator()
        self.api_key = api_key

    async def commit_and_push(self, local_path: str) -> CommitPushResult:
        """Commit pending changes and push the current branch.

        Args:
            local_path: Repository working directory

        Returns:
            CommitPushResult; on failure ``stage`` names the step that failed
        """
        if not await repository_exists(local_path):
            return _failed(
                PushStage.CHECK_STATUS, ErrorKind.NOT_FOUND, REPOSITORY_NOT_FOUND_MSG
            )

        status_result = await self.runner.run_git(
            ["status", "--porcelain"], cwd=local_path, timeout=READ_PROBE_TIMEOUT_SECONDS
        )
        if not status_result.ok:
            return _failed_command(PushStage.CHECK_STATUS, status_result)

        status_text = status_result.stdout.strip()
        draft = CommitDraft(title=DEFAULT_PUSH_TITLE)

        if status_text:
            if not self.api_key.strip():
                return _failed(
                    PushStage.REQUIRE_CREDENTIAL,
                    ErrorKind.MISSING_CREDENTIAL,
                    "OpenAI API key is not configured",
                )

            diff = await self._collect_diff(local_path)
            try:
                draft = await self.message_generator.generate(
                    diff or status_text, self.api_key
                )
            except CommitMessageError as e:
                return _failed(PushStage.GENERATE_MESSAGE, e.error_kind, str(e))

            failure = await self._stage_and_commit(local_path, draft)
            if failure:
                return failure

        await self._pull_rebase(local_path)

        push_result = await self.runner.run_git(
            ["push"], cwd=local_path, timeout=SYNC_TIMEOUT_SECONDS
        )
        if not push_result.ok:
            return _failed_command(PushStage.PUSH, push_result, draft)

        logger.info(f"✅ Pushed {local_path}: {draft.title}")
        return CommitPushResult(
            ok=True, stage=PushStage.DONE, title=draft.title, body=draft.body
        )

    async def _collect_diff(self, local_path: str) -> str:
        """Staged plus unstaged diff; empty when either command fails."""
        staged = await self.runner.run_git(
            ["diff", "--cached"], cwd=local_path, timeout=DIFF_TIMEOUT_SECONDS
        )
        unstaged = await self.runner.run_git(
            ["diff"], cwd=local_path, timeout=DIFF_TIMEOUT_SECONDS
        )
        if not (staged.ok and unstaged.ok):
            logger.warning(f"Diff unavailable for {local_path}, using status text instead")
            return ""
        return (staged.stdout + unstaged.stdout).strip()

    async def _stage_and_commit(
        self, local_path: str, draft: CommitDraft
    ) -> Optional[CommitPushResult]:
        add_result = await self.runner.run_git(
            ["add", "-A"], cwd=local_path, timeout=STAGE_TIMEOUT_SECONDS
        )
        if not add_result.ok:
            return _failed_command(PushStage.STAGE, add_result, draft)

        # Arguments go straight to git (no shell), quotes need no escaping.
        commit_args = ["commit", "-m", draft.title]
        if draft.body:
            commit_args += ["-m", draft.body]

        commit_result = await self.runner.run_git(
            commit_args, cwd=local_path, timeout=COMMIT_TIMEOUT_SECONDS
        )
        if not commit_result.ok:
            output = f"{commit_result.stdout}\n{commit_result.stderr}".lower()
            if NOTHING_TO_COMMIT_MSG in output:
                logger.info(f"{local_path}: {NOTHING_TO_COMMIT_MSG}, pushing existing commits")
                return None
            return _failed_command(PushStage.COMMIT, commit_result, draft)

        logger.info(f"Committed {local_path}: {draft.title}")
        return None

    async def _pull_rebase(self, local_path: str) -> None:
        """Rebase onto the remote; a failure here is left for push to surface."""
        result = await self.runner.run_git(
            ["pull", "--rebase"], cwd=local_path, timeout=SYNC_TIMEOUT_SECONDS
        )
        if not result.ok:
            logger.warning(f"⚠️ Pull --rebase failed for {local_path}, pushing anyway: {result.message}")

    async def pull(self, local_path: str) -> GitOperationResult:
        """Plain ``git pull`` of the current branch.

        Args:
            local_path: Repository working directory

        Returns:
            GitOperationResult with the tool's error (truncated) on failure
        """
        if not await repository_exists(local_path):
            return GitOperationResult(
                success=False, message="Pull failed", error=REPOSITORY_NOT_FOUND_MSG
            )

        result = await self.runner.run_git(
            ["pull"], cwd=local_path, timeout=SYNC_TIMEOUT_SECONDS
        )
        if not result.ok:
            logger.error(f"Git pull failed for {local_path}: {result.message}")
            return GitOperationResult(
                success=False,
                message="Pull failed",
                error=truncate(result.message or "git pull failed", OPERATION_ERROR_MAX_CHARS),
            )

        logger.info(f"Git pull successful for {local_path}")
        return GitOperationResult(success=True, message=result.stdout.strip() or "Pulled")
