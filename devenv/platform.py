"""Host platform detection and command probing."""

import logging
import os
import platform as _platform
import shlex
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from devenv.execution import PROBE_TIMEOUT, CommandRunner
from devenv.paths import get_home_directory

_logging = logging.getLogger(__name__)


class OSFamily(Enum):
    MACOS = "darwin"
    LINUX = "linux"
    WINDOWS = "win32"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PlatformDescriptor:
    os_family: OSFamily
    raw_platform_name: str
    architecture: str


def detect_platform(
    platform_name: str | None = None, machine: str | None = None
) -> PlatformDescriptor:
    """Describe the execution environment.

    Unrecognised platform names map to OSFamily.UNKNOWN; this never raises.
    """
    raw = platform_name if platform_name is not None else sys.platform
    arch = machine if machine is not None else (_platform.machine() or "unknown")

    if raw == "darwin":
        family = OSFamily.MACOS
    elif raw.startswith("linux"):
        family = OSFamily.LINUX
    elif raw in ("win32", "cygwin"):
        family = OSFamily.WINDOWS
    else:
        family = OSFamily.UNKNOWN

    return PlatformDescriptor(os_family=family, raw_platform_name=raw, architecture=arch)


def is_supported(descriptor: PlatformDescriptor) -> bool:
    """Only macOS and Linux hosts are supported."""
    return descriptor.os_family in (OSFamily.MACOS, OSFamily.LINUX)


def shell_profile_path(
    shell: str | None = None,
    os_family: OSFamily | None = None,
    home: Path | None = None,
) -> Path:
    """Return the profile file the active shell reads on startup."""
    if shell is None:
        shell = os.environ.get("SHELL", "")
    if os_family is None:
        os_family = detect_platform().os_family
    if home is None:
        home = get_home_directory()

    if "zsh" in shell:
        return home / ".zshrc"
    if "bash" in shell:
        if os_family == OSFamily.MACOS:
            return home / ".bash_profile"
        return home / ".bashrc"
    return home / ".profile"


class PlatformProbe:
    """Answers existence and version questions by running shell commands."""

    def __init__(
        self,
        runner: CommandRunner,
        timeout: int = PROBE_TIMEOUT,
        platform: PlatformDescriptor | None = None,
    ):
        self.runner = runner
        self.timeout = timeout
        self.platform = platform or detect_platform()

    async def command_exists(self, name: str) -> bool:
        outcome = await self.runner.run(
            f"which {shlex.quote(name)}", timeout=self.timeout
        )
        return outcome.succeeded and bool(outcome.stdout.strip())

    async def is_present(self, command: str, marker_path: str | None = None) -> bool:
        """True if the command is on PATH or the marker file exists.

        Shell functions such as nvm are invisible to `which`, so their
        catalog entries name a file the installer leaves behind instead.
        """
        if await self.command_exists(command):
            return True
        return bool(marker_path) and Path(marker_path).exists()

    async def resolve_version(
        self, name: str, version_flag: str = "--version"
    ) -> str | None:
        """Return the first line a tool prints for its version flag.

        Some tools (java -version) report on stderr, so stderr is used when
        stdout is empty.
        """
        outcome = await self.runner.run(f"{name} {version_flag}", timeout=self.timeout)
        if not outcome.succeeded:
            _logging.debug(f"Version probe failed for {name}: {outcome.details}")
            return None

        text = outcome.stdout.strip() or outcome.stderr.strip()
        if not text:
            return None
        return text.splitlines()[0]

    async def detect_distribution(self) -> str | None:
        """Return the NAME= field of /etc/os-release on Linux hosts."""
        if self.platform.os_family != OSFamily.LINUX:
            return None

        outcome = await self.runner.run("cat /etc/os-release", timeout=self.timeout)
        if not outcome.succeeded:
            return None

        for line in outcome.stdout.splitlines():
            if line.startswith("NAME="):
                return line.split("=", 1)[1].strip().strip('"')
        return None


__all__ = [
    "OSFamily",
    "PlatformDescriptor",
    "PlatformProbe",
    "detect_platform",
    "is_supported",
    "shell_profile_path",
]
