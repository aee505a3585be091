"""
Test fixtures for git-related tests.

Provides a scripted stand-in for ProcessRunner and helpers to build
ProcessResult values and fake repository directories.
"""

import asyncio
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from gitmonitor.services.git.process_runner import ProcessFailure, ProcessResult

Response = Union[ProcessResult, Callable[[Tuple[str, ...], str], ProcessResult]]


def ok_result(stdout: str = "", args: Sequence[str] = ("git",)) -> ProcessResult:
    return ProcessResult(command=tuple(args), returncode=0, stdout=stdout)


def failed_result(
    stderr: str = "fatal: failure", args: Sequence[str] = ("git",), returncode: int = 1
) -> ProcessResult:
    return ProcessResult(
        command=tuple(args),
        returncode=returncode,
        stderr=stderr,
        failure=ProcessFailure.NON_ZERO_EXIT,
    )


def timed_out_result(args: Sequence[str] = ("git",)) -> ProcessResult:
    return ProcessResult(
        command=tuple(args), returncode=None, failure=ProcessFailure.TIMED_OUT
    )


def make_fake_repo(root: Path, name: str = "repo") -> Path:
    """Create a directory that passes the repository existence check."""
    repo = root / name
    (repo / ".git").mkdir(parents=True)
    return repo


class ScriptedGitRunner:
    """
    Replays canned results for git subcommands.

    Responses are keyed by the leading git arguments, e.g. ("status",) or
    ("rev-parse", "HEAD"); the longest matching key wins. Unmatched commands
    succeed with empty output. Every call is recorded in ``calls``.

    Example:
        >>> runner = ScriptedGitRunner({("status",): ok_result(" M a.py\\n")})
    """

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, ...], Response]] = None,
        delays: Optional[Dict[Tuple[str, ...], float]] = None,
    ):
        self.responses = responses or {}
        self.delays = delays or {}
        self.calls: List[Tuple[Tuple[str, ...], str, float]] = []

    @staticmethod
    def _lookup(table: Dict[Tuple[str, ...], object], args: Tuple[str, ...]):
        best = None
        for key in table:
            if args[: len(key)] == key and (best is None or len(key) > len(best)):
                best = key
        return table[best] if best is not None else None

    async def run_git(
        self, args: Sequence[str], cwd: str, timeout: float
    ) -> ProcessResult:
        args = tuple(args)
        self.calls.append((args, cwd, timeout))

        delay = self._lookup(self.delays, args)
        if delay:
            await asyncio.sleep(min(delay, timeout))
            if delay > timeout:
                return timed_out_result(("git", *args))

        response = self._lookup(self.responses, args)
        if response is None:
            return ok_result(args=("git", *args))
        if callable(response):
            return response(args, cwd)
        return response

    async def run(self, command: Sequence[str], cwd: str, timeout: float) -> ProcessResult:
        return await self.run_git(tuple(command)[1:], cwd, timeout)

    def subcommands(self) -> List[str]:
        return [call[0][0] for call in self.calls]

    def calls_for(self, subcommand: str) -> List[Tuple[str, ...]]:
        return [call[0] for call in self.calls if call[0][0] == subcommand]
