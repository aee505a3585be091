"""Subprocess execution for git commands.

Every failure (non-zero exit, timeout, missing executable) is returned as a
value on ProcessResult. Callers decide what a failure means for them.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from gitmonitor.common.config.config import GIT_BINARY
from gitmonitor.models.types import ErrorKind

logger = logging.getLogger(__name__)

# Credential prompts would block until the timeout kills the process
GIT_ENVIRONMENT = {"GIT_TERMINAL_PROMPT": "0"}


class ProcessFailure(str, Enum):
    TIMED_OUT = "timed_out"
    NON_ZERO_EXIT = "non_zero_exit"
    SPAWN_FAILURE = "spawn_failure"


@dataclass(frozen=True)
class ProcessResult:
    command: Tuple[str, ...]
    returncode: Optional[int]
    stdout: str = ""
    stderr: str = ""
    failure: Optional[ProcessFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def message(self) -> str:
        """Best description of what happened, for logs and error summaries."""
        if self.failure is ProcessFailure.TIMED_OUT:
            return f"Command {' '.join(self.command)} timed out"
        return self.stderr.strip() or self.stdout.strip()

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        if self.failure is None:
            return None
        if self.failure is ProcessFailure.TIMED_OUT:
            return ErrorKind.TIMEOUT
        return ErrorKind.TOOL_FAILURE


class GitCommandError(Exception):
    """Raised by callers that cannot continue after a failed git command."""

    def __init__(self, result: ProcessResult):
        self.result = result
        super().__init__(result.message or f"{' '.join(result.command)} failed")

    @property
    def error_kind(self) -> ErrorKind:
        return self.result.error_kind or ErrorKind.TOOL_FAILURE


class ProcessRunner:
    """Runs external commands asynchronously with a per-call timeout."""

    def __init__(self, git_binary: str = GIT_BINARY):
        self.git_binary = git_binary

    async def run(
        self, command: Sequence[str], cwd: str, timeout: float
    ) -> ProcessResult:
        """Run a command and capture its output.

        Args:
            command: Executable and arguments
            cwd: Working directory
            timeout: Seconds before the process is killed

        Returns:
            ProcessResult; ``failure`` is set when the command did not succeed
        """
        cmd = tuple(command)
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
                cwd=cwd,
                env={**os.environ, **GIT_ENVIRONMENT},
            )
        except OSError as e:
            logger.warning(f"Could not start {' '.join(cmd)} in {cwd}: {e}")
            return ProcessResult(
                command=cmd,
                returncode=None,
                stderr=str(e),
                failure=ProcessFailure.SPAWN_FAILURE,
            )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
        except asyncio.TimeoutError:
            await self._kill(process)
            logger.warning(f"Command {' '.join(cmd)} timed out after {timeout}s in {cwd}")
            return ProcessResult(
                command=cmd,
                returncode=None,
                failure=ProcessFailure.TIMED_OUT,
            )
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        result = ProcessResult(
            command=cmd,
            returncode=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            failure=None if process.returncode == 0 else ProcessFailure.NON_ZERO_EXIT,
        )
        if not result.ok:
            logger.debug(
                f"Command {' '.join(cmd)} exited with {process.returncode}: {result.message}"
            )
        return result

    async def run_git(
        self, args: Sequence[str], cwd: str, timeout: float
    ) -> ProcessResult:
        """Run a git subcommand (arguments without the 'git' prefix)."""
        return await self.run([self.git_binary, *args], cwd=cwd, timeout=timeout)

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
