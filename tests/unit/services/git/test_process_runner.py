"""Tests for ProcessRunner using real child processes."""

import asyncio
import sys
import time

import pytest

from gitmonitor.models.types import ErrorKind
from gitmonitor.services.git.process_runner import (
    GitCommandError,
    ProcessFailure,
    ProcessResult,
    ProcessRunner,
)


@pytest.fixture
def runner():
    return ProcessRunner()


def python_cmd(code: str):
    return [sys.executable, "-c", code]


class TestProcessRunner:
    @pytest.mark.asyncio
    async def test_captures_stdout(self, runner, tmp_path):
        result = await runner.run(python_cmd("print('hello')"), cwd=str(tmp_path), timeout=10)

        assert result.ok
        assert result.returncode == 0
        assert result.stdout.strip() == "hello"
        assert result.failure is None

    @pytest.mark.asyncio
    async def test_runs_in_working_directory(self, runner, tmp_path):
        result = await runner.run(
            python_cmd("import os; print(os.getcwd())"), cwd=str(tmp_path), timeout=10
        )

        assert result.ok
        assert result.stdout.strip().endswith(tmp_path.name)

    @pytest.mark.asyncio
    async def test_disables_git_credential_prompts(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("GIT_MONITOR_MARKER", "kept")
        monkeypatch.delenv("GIT_TERMINAL_PROMPT", raising=False)

        result = await runner.run(
            python_cmd(
                "import os; print(os.environ.get('GIT_TERMINAL_PROMPT'), "
                "os.environ.get('GIT_MONITOR_MARKER'))"
            ),
            cwd=str(tmp_path),
            timeout=10,
        )

        assert result.stdout.split() == ["0", "kept"]

    @pytest.mark.asyncio
    async def test_non_zero_exit_is_a_value(self, runner, tmp_path):
        result = await runner.run(
            python_cmd("import sys; sys.stderr.write('bad thing'); sys.exit(3)"),
            cwd=str(tmp_path),
            timeout=10,
        )

        assert not result.ok
        assert result.failure is ProcessFailure.NON_ZERO_EXIT
        assert result.returncode == 3
        assert result.message == "bad thing"
        assert result.error_kind is ErrorKind.TOOL_FAILURE

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, runner, tmp_path):
        start = time.monotonic()
        result = await runner.run(
            python_cmd("import time; time.sleep(30)"), cwd=str(tmp_path), timeout=0.5
        )

        assert time.monotonic() - start < 10
        assert result.failure is ProcessFailure.TIMED_OUT
        assert result.error_kind is ErrorKind.TIMEOUT
        assert "timed out" in result.message

    @pytest.mark.asyncio
    async def test_missing_executable_is_spawn_failure(self, runner, tmp_path):
        result = await runner.run(
            ["definitely-not-a-real-binary-xyz"], cwd=str(tmp_path), timeout=5
        )

        assert result.failure is ProcessFailure.SPAWN_FAILURE
        assert result.returncode is None

    @pytest.mark.asyncio
    async def test_missing_working_directory_is_spawn_failure(self, runner, tmp_path):
        result = await runner.run(
            python_cmd("print(1)"), cwd=str(tmp_path / "gone"), timeout=5
        )

        assert result.failure is ProcessFailure.SPAWN_FAILURE

    @pytest.mark.asyncio
    async def test_run_git_prefixes_binary(self, tmp_path):
        runner = ProcessRunner(git_binary=sys.executable)

        result = await runner.run_git(["-c", "print('via git')"], cwd=str(tmp_path), timeout=10)

        assert result.command[0] == sys.executable
        assert result.stdout.strip() == "via git"

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, runner, tmp_path):
        task = asyncio.create_task(
            runner.run(python_cmd("import time; time.sleep(30)"), cwd=str(tmp_path), timeout=60)
        )
        await asyncio.sleep(0.5)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task


class TestGitCommandError:
    def test_carries_result_and_kind(self):
        result = ProcessResult(
            command=("git", "push"),
            returncode=None,
            failure=ProcessFailure.TIMED_OUT,
        )

        error = GitCommandError(result)

        assert error.result is result
        assert error.error_kind is ErrorKind.TIMEOUT
        assert "timed out" in str(error)
