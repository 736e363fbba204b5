"""Runs the git executable for a bound working directory."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Sequence

from git.cmd import Git
from git.exc import GitCommandNotFound

from .errors import SPAWN_FAILED_EXIT, ExecutionError

logger = logging.getLogger(__name__)


def _to_text(value: bytes | str) -> str:
    """Decode git output as UTF-8, replacing bytes that are not valid UTF-8."""
    if isinstance(value, str):
        # GitPython always hands stderr back decoded with surrogateescape
        value = value.encode("utf-8", "surrogateescape")
    return value.decode("utf-8", "replace")


class GitExecutor:
    """Executes git commands through GitPython's command layer.

    Every call spawns exactly one process and waits for it to exit. Calls
    run on a worker thread so the event loop stays responsive. There is no
    timeout: a hung git process hangs the awaiting caller.
    """

    def __init__(
        self,
        git_path: str = "git",
        cwd: str | Path = ".",
        debug: bool = False,
        serialize: bool = False,
    ):
        """Initialize the executor.

        Args:
            git_path: Git executable name or absolute path
            cwd: Working directory git runs in
            debug: Log every invocation with its exit code and output
            serialize: Allow only one git process at a time for this executor
        """
        self.git_path = git_path
        self.debug = debug
        self._cwd = Path(cwd)
        self._lock = asyncio.Lock() if serialize else None

    @property
    def cwd(self) -> Path:
        return self._cwd

    def set_cwd(self, cwd: str | Path) -> None:
        """Rebind the executor to another working directory."""
        self._cwd = Path(cwd)

    def get_cwd(self) -> Path:
        return self._cwd

    async def run(self, args: Sequence[str]) -> str:
        """Run git with ``args`` and return its stdout.

        Raises:
            ExecutionError: git exited non-zero or could not be started
        """
        args = list(args)
        if self._lock is None:
            return await asyncio.to_thread(self._execute, args)
        async with self._lock:
            return await asyncio.to_thread(self._execute, args)

    async def run_silent(self, args: Sequence[str]) -> str | None:
        """Run git like ``run`` but return None instead of raising."""
        try:
            return await self.run(args)
        except ExecutionError:
            return None

    def _execute(self, args: list[str]) -> str:
        if self.debug:
            logger.debug("Running: git %s (cwd=%s)", " ".join(args), self._cwd)

        # GitPython silently falls back to the process cwd for a missing
        # directory, so refuse to spawn instead.
        if not os.path.isdir(self._cwd):
            raise ExecutionError(
                args, SPAWN_FAILED_EXIT, f"working directory does not exist: {self._cwd}"
            )

        try:
            status, stdout, stderr = Git(str(self._cwd)).execute(
                [self.git_path, *args],
                with_extended_output=True,
                with_exceptions=False,
                strip_newline_in_stdout=False,
                stdout_as_string=False,
            )
        except GitCommandNotFound as e:
            if self.debug:
                logger.debug("Spawn failed: %s", e)
            raise ExecutionError(args, SPAWN_FAILED_EXIT, str(e)) from e

        stdout, stderr = _to_text(stdout), _to_text(stderr)

        if self.debug:
            logger.debug("Exit code: %s", status)
            if stdout:
                logger.debug("stdout: %s", stdout)
            if stderr:
                logger.debug("stderr: %s", stderr)

        if status != 0:
            raise ExecutionError(args, status, stderr, stdout)
        return stdout
