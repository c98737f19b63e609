"""Async execution of external commands (git, gh) with bounded output."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

import git

from git_workspace_keeper.config import MIN_OUTPUT_LIMIT_BYTES
from git_workspace_keeper.exceptions import CommandError, OutputLimitExceededError
from git_workspace_keeper.logging_config import get_logger

logger = get_logger(__name__)

READ_CHUNK_SIZE = 64 * 1024


class CommandRunner:
    """Runs external commands off the event loop.

    Commands are executed through GitPython's ``Git.execute`` in a worker
    thread, so a slow ``git fetch`` suspends only the awaiting task.
    """

    def __init__(self, output_limit: int = MIN_OUTPUT_LIMIT_BYTES, git_executable: str = "git"):
        """Initialize the runner.

        Args:
            output_limit: Maximum bytes of stdout kept per command
            git_executable: Program used by :meth:`git`
        """
        self.output_limit = output_limit
        self.git_executable = git_executable

    async def run(
        self,
        program: str,
        args: Sequence[str],
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """Run ``program`` with ``args`` in ``cwd`` and return stdout with trailing whitespace trimmed.

        Args:
            program: Executable name or path
            args: Arguments passed to the program
            cwd: Working directory
            timeout: Seconds before the process is killed; None waits forever

        Raises:
            CommandError: On non-zero exit, spawn failure or timeout
            OutputLimitExceededError: When stdout grows past the output limit
        """
        return await asyncio.to_thread(self._execute, program, list(args), cwd, timeout)

    async def git(self, args: Sequence[str], cwd: Optional[str] = None) -> str:
        """Run a git subcommand."""
        return await self.run(self.git_executable, args, cwd)

    def _execute(self, program: str, args: list, cwd: Optional[str], timeout: Optional[float]) -> str:
        command = [program, *args]
        logger.debug(f"Running {' '.join(command)} (cwd={cwd})")
        executor = git.Git(cwd)

        try:
            if timeout is None:
                status, stdout, stderr = self._execute_bounded(executor, command, program, args, cwd)
            else:
                # Probes produce a few lines at most and GitPython's own
                # communicate() drains both pipes, so no cap is needed here.
                status, stdout, stderr = executor.execute(
                    command,
                    with_extended_output=True,
                    with_exceptions=False,
                    kill_after_timeout=timeout,
                )
        except git.exc.GitCommandNotFound as e:
            logger.debug(f"Could not spawn {program}: {e}")
            raise CommandError(program, args, cwd, status=None, stderr=str(e)) from e

        if status != 0:
            logger.debug(f"{program} exited with {status}: {(stderr or '').strip()}")
            raise CommandError(program, args, cwd, status=status, stderr=stderr or "", stdout=stdout or "")

        # Leading whitespace is significant in porcelain formats ("XY path")
        return (stdout or "").rstrip()

    def _execute_bounded(self, executor: "git.Git", command: list, program: str, args: list, cwd: Optional[str]):
        """Run ``command`` reading stdout up to the output limit.

        stderr is drained on a second thread; ``git fetch`` reports every
        updated ref there and would otherwise block on a full pipe.
        """
        handle = executor.execute(command, as_process=True)
        proc = handle.proc
        pool = ThreadPoolExecutor(max_workers=1)
        stderr_future = pool.submit(proc.stderr.read)

        stdout = bytearray()
        overflow = False
        while True:
            chunk = proc.stdout.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            if len(stdout) + len(chunk) > self.output_limit:
                overflow = True
                break
            stdout.extend(chunk)

        if overflow:
            proc.kill()
            proc.wait()
            proc.stdout.close()
            # Children of the killed process may still hold stderr open, so the
            # reader thread keeps the pipe until it sees EOF
            handle.proc = None
            pool.shutdown(wait=False)
            logger.warning(f"{program} output exceeded {self.output_limit} bytes")
            raise OutputLimitExceededError(program, args, cwd, self.output_limit)

        stderr = stderr_future.result()
        pool.shutdown()
        status = proc.wait()
        return (
            status,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )
