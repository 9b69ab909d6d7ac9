"""Run command scripts through a shell and report their outcome."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from alfred_cli.commands.schema import CommandSpec
from alfred_cli.commands.templating import render_script

logger = logging.getLogger(__name__)

# Exit code reported when the shell itself could not be started
SPAWN_FAILURE_EXIT_CODE = 127


@dataclass
class ExecutorConfig:
    """Settings for script execution.

    Attributes:
        shell: Shell binary invoked as ``<shell> -c <script>``.
        verbose: Print the resolved script and directory before running.
    """

    shell: str = "bash"
    verbose: bool = False


@dataclass
class ExecutionResult:
    """Outcome of one script run."""

    script: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    cwd: Path | None = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def resolve_dir(directory: str | None) -> Path | None:
    """Expand a leading ``~`` in a working directory."""
    if not directory:
        return None
    return Path(directory).expanduser()


class Executor:
    """Runs command scripts as subprocesses.

    The working directory is passed to each subprocess; the current
    process never changes directory, so concurrent runs with different
    ``dir`` values do not interfere.
    """

    def __init__(
        self,
        config: ExecutorConfig | None = None,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.config = config or ExecutorConfig()
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    async def run(
        self, spec: CommandSpec, options: Mapping[str, Any] | None = None
    ) -> ExecutionResult:
        """Render and run a single script.

        A non-zero exit is reported, not raised.
        """
        cwd = resolve_dir(spec.dir)
        script = render_script(spec.cmd, options or {})

        if self.config.verbose:
            location = f" [dim](in {escape(str(cwd))})[/dim]" if cwd else ""
            self.console.print(f"[dim]$[/dim] {escape(script)}{location}", highlight=False)

        result = await self._spawn(script, cwd)
        self._report(result)
        return result

    async def run_all(
        self,
        specs: Sequence[CommandSpec],
        options: Mapping[str, Any] | None = None,
    ) -> list[ExecutionResult]:
        """Run several scripts concurrently.

        Every script runs to completion; a failure in one does not cancel
        the others. Results are returned in the order of ``specs``.
        """
        return list(await asyncio.gather(*(self.run(spec, options) for spec in specs)))

    async def _spawn(self, script: str, cwd: Path | None) -> ExecutionResult:
        logger.debug("Spawning %s", self.config.shell, extra={"script": script, "cwd": cwd})
        try:
            process = await asyncio.create_subprocess_exec(
                self.config.shell,
                "-c",
                script,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.debug("Failed to start %s: %s", self.config.shell, e, extra={"cwd": cwd})
            return ExecutionResult(
                script=script,
                exit_code=SPAWN_FAILURE_EXIT_CODE,
                stderr=f"{e}\n",
                cwd=cwd,
            )

        stdout, stderr = await process.communicate()
        exit_code = process.returncode if process.returncode is not None else 1
        logger.debug("Script finished", extra={"script": script, "exit_code": exit_code})

        return ExecutionResult(
            script=script,
            exit_code=exit_code,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            cwd=cwd,
        )

    def _report(self, result: ExecutionResult) -> None:
        if result.success:
            if result.stdout:
                self.console.out(result.stdout, end="", highlight=False)
            return

        if result.stderr:
            self.err_console.out(result.stderr, end="", highlight=False)
        self.err_console.print(f"Exit code: {result.exit_code}", highlight=False)
