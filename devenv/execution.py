"""Async command execution utilities."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

PROBE_TIMEOUT = 10
DEFAULT_TIMEOUT = 60
POST_INSTALL_TIMEOUT = 120
VERSION_MANAGER_TIMEOUT = 300
INSTALL_TIMEOUT = 600

_logging = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutcome:
    """Captured result of a single shell invocation."""
    stdout: str
    stderr: str
    succeeded: bool
    failure_reason: str | None = None

    @property
    def details(self) -> str:
        """Most diagnostic text for this outcome."""
        if self.succeeded:
            return self.stdout
        return self.failure_reason or self.stderr or self.stdout


@runtime_checkable
class CommandRunner(Protocol):
    """Anything that can run a shell command and report a CommandOutcome.

    Implementations must never raise for timeouts or non-zero exits.
    """

    async def run(
        self, command: str, *, timeout: int = DEFAULT_TIMEOUT, cwd: str | None = None
    ) -> CommandOutcome:
        ...


async def run_command_async(
    command: str,
    timeout: int = DEFAULT_TIMEOUT,
    cwd: str | None = None,
    debug: bool = False,
) -> CommandOutcome:
    """Run a command asynchronously and capture its output."""
    process = None
    try:
        if debug:
            _logging.debug(f"Running command: {command}")
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            _ = await process.wait()
            _logging.error(f"Command timed out after {timeout} seconds: {command}")
            return CommandOutcome(
                stdout="",
                stderr="",
                succeeded=False,
                failure_reason=f"Command timed out after {timeout} seconds",
            )

        out = stdout.decode(errors="replace").strip()
        err = stderr.decode(errors="replace").strip()
        if err and debug:
            _logging.debug(f"stderr: {err}")

        returncode = process.returncode if process.returncode is not None else 1
        if returncode == 0:
            return CommandOutcome(stdout=out, stderr=err, succeeded=True)
        return CommandOutcome(
            stdout=out,
            stderr=err,
            succeeded=False,
            failure_reason=f"Command failed with exit code {returncode}: {err or out}",
        )
    except Exception as e:
        _logging.error(
            f"Command execution failed: {type(e).__name__}: {e} | Command: {command}"
        )
        return CommandOutcome(
            stdout="", stderr="", succeeded=False, failure_reason=f"Error: {e}"
        )
    finally:
        if process:
            transport = getattr(process, "_transport", None)
            if transport:
                transport.close()


class ShellCommandRunner:
    """CommandRunner backed by the system shell."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    async def run(
        self, command: str, *, timeout: int = DEFAULT_TIMEOUT, cwd: str | None = None
    ) -> CommandOutcome:
        return await run_command_async(
            command, timeout=timeout, cwd=cwd, debug=self.debug
        )


__all__ = [
    "PROBE_TIMEOUT",
    "DEFAULT_TIMEOUT",
    "POST_INSTALL_TIMEOUT",
    "VERSION_MANAGER_TIMEOUT",
    "INSTALL_TIMEOUT",
    "CommandOutcome",
    "CommandRunner",
    "ShellCommandRunner",
    "run_command_async",
]
