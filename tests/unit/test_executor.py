"""Tests for script execution."""

import time
from pathlib import Path
from typing import Any

import pytest

from alfred_cli.commands.executor import (
    SPAWN_FAILURE_EXIT_CODE,
    ExecutionResult,
    Executor,
    ExecutorConfig,
    resolve_dir,
)
from alfred_cli.commands.schema import CommandSpec


@pytest.fixture
def executor(consoles: Any) -> Executor:
    """Executor printing to in-memory consoles."""
    return Executor(
        ExecutorConfig(),
        console=consoles.console,
        err_console=consoles.err_console,
    )


class TestResolveDir:
    """Tests for working directory expansion."""

    def test_none(self) -> None:
        """Test no directory means no change."""
        assert resolve_dir(None) is None
        assert resolve_dir("") is None

    def test_home_expanded(self) -> None:
        """Test a leading ~ becomes the home directory."""
        assert resolve_dir("~/projects") == Path.home() / "projects"

    def test_absolute_kept(self) -> None:
        """Test absolute paths are kept."""
        assert resolve_dir("/tmp") == Path("/tmp")


class TestExecutionResult:
    """Tests for ExecutionResult."""

    def test_success(self) -> None:
        """Test success follows the exit code."""
        assert ExecutionResult(script="true", exit_code=0).success is True
        assert ExecutionResult(script="false", exit_code=1).success is False


class TestExecutor:
    """Tests for running scripts."""

    @pytest.mark.asyncio
    async def test_success_prints_stdout(self, executor: Executor, consoles: Any) -> None:
        """Test a successful script's output is printed."""
        result = await executor.run(CommandSpec(cmd="echo ok"))

        assert result.exit_code == 0
        assert "ok" in result.stdout
        assert "ok" in consoles.out
        assert consoles.err == ""

    @pytest.mark.asyncio
    async def test_failure_reports_exit_code(self, executor: Executor, consoles: Any) -> None:
        """Test a failing script reports stderr and exit code without raising."""
        result = await executor.run(CommandSpec(cmd="echo boom >&2; exit 3"))

        assert result.exit_code == 3
        assert result.stdout == ""
        assert "boom" in consoles.err
        assert "Exit code: 3" in consoles.err
        assert consoles.out == ""

    @pytest.mark.asyncio
    async def test_plain_exit(self, executor: Executor, consoles: Any) -> None:
        """Test exit 3 yields code 3 and an exit message on the error console."""
        result = await executor.run(CommandSpec(cmd="exit 3"))

        assert result.exit_code == 3
        assert result.stdout == ""
        assert "Exit code: 3" in consoles.err

    @pytest.mark.asyncio
    async def test_options_templated(self, executor: Executor) -> None:
        """Test options are substituted before running."""
        result = await executor.run(
            CommandSpec(cmd="echo hello ${name} ${missing}"), {"name": "world"}
        )

        assert result.script == "echo hello world"
        assert result.stdout.strip() == "hello world"

    @pytest.mark.asyncio
    async def test_runs_in_dir(self, executor: Executor, temp_dir: Path) -> None:
        """Test the script runs in the requested directory."""
        cwd = Path.cwd()
        result = await executor.run(CommandSpec(dir=str(temp_dir), cmd="pwd"))

        assert Path(result.stdout.strip()).resolve() == temp_dir.resolve()
        assert Path.cwd() == cwd

    @pytest.mark.asyncio
    async def test_missing_dir_contained(self, executor: Executor, consoles: Any, temp_dir: Path) -> None:
        """Test an unusable directory is reported as a failed result."""
        result = await executor.run(CommandSpec(dir=str(temp_dir / "nope"), cmd="true"))

        assert result.exit_code == SPAWN_FAILURE_EXIT_CODE
        assert f"Exit code: {SPAWN_FAILURE_EXIT_CODE}" in consoles.err

    @pytest.mark.asyncio
    async def test_run_all_does_not_short_circuit(self, executor: Executor, temp_dir: Path) -> None:
        """Test every script runs even when one fails."""
        marker = temp_dir / "marker"
        results = await executor.run_all(
            [
                CommandSpec(cmd="exit 1"),
                CommandSpec(cmd=f"sleep 0.1; touch {marker}"),
                CommandSpec(cmd="echo two"),
            ]
        )

        assert [r.exit_code for r in results] == [1, 0, 0]
        assert results[2].stdout.strip() == "two"
        assert marker.exists()

    @pytest.mark.asyncio
    async def test_run_all_is_concurrent(self, executor: Executor) -> None:
        """Test scripts overlap instead of running one after another."""
        started = time.monotonic()
        results = await executor.run_all(
            [CommandSpec(cmd="sleep 0.5"), CommandSpec(cmd="sleep 0.5")]
        )
        elapsed = time.monotonic() - started

        assert [r.exit_code for r in results] == [0, 0]
        assert elapsed < 0.9

    @pytest.mark.asyncio
    async def test_run_all_with_different_dirs(self, executor: Executor, temp_dir: Path) -> None:
        """Test concurrent scripts each get their own directory."""
        first = temp_dir / "first"
        second = temp_dir / "second"
        first.mkdir()
        second.mkdir()

        results = await executor.run_all(
            [CommandSpec(dir=str(first), cmd="pwd"), CommandSpec(dir=str(second), cmd="pwd")]
        )

        assert Path(results[0].stdout.strip()).name == "first"
        assert Path(results[1].stdout.strip()).name == "second"

    @pytest.mark.asyncio
    async def test_verbose_prints_script(self, consoles: Any) -> None:
        """Test verbose mode echoes the resolved script."""
        executor = Executor(
            ExecutorConfig(verbose=True),
            console=consoles.console,
            err_console=consoles.err_console,
        )
        await executor.run(CommandSpec(cmd="echo ${word}"), {"word": "hi"})

        assert "$ echo hi" in consoles.out

    @pytest.mark.asyncio
    async def test_missing_shell_contained(self, consoles: Any) -> None:
        """Test a shell that cannot be started becomes a failed result."""
        executor = Executor(
            ExecutorConfig(shell="definitely-not-a-shell"),
            console=consoles.console,
            err_console=consoles.err_console,
        )
        result = await executor.run(CommandSpec(cmd="true"))

        assert result.success is False
        assert result.exit_code == SPAWN_FAILURE_EXIT_CODE
