"""Package manager detection and bootstrap commands."""

import logging
from dataclasses import replace

from devenv.platform import OSFamily, PlatformDescriptor, PlatformProbe

from .models import PackageManagerDescriptor, PackageManagerId

_logging = logging.getLogger(__name__)

HOMEBREW_INSTALL_COMMAND = (
    '/bin/bash -c "$(curl -fsSL '
    'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)

PACKAGE_MANAGERS: dict[PackageManagerId, PackageManagerDescriptor] = {
    PackageManagerId.HOMEBREW: PackageManagerDescriptor(
        identifier=PackageManagerId.HOMEBREW,
        probe_command="brew",
        install_command_prefix="brew install",
        update_command_prefix="brew update && brew upgrade",
        search_command_prefix="brew search",
    ),
    PackageManagerId.APT: PackageManagerDescriptor(
        identifier=PackageManagerId.APT,
        probe_command="apt-get",
        install_command_prefix="sudo apt-get install -y",
        update_command_prefix="sudo apt-get update && sudo apt-get upgrade -y",
        search_command_prefix="apt-cache search",
    ),
    PackageManagerId.DNF: PackageManagerDescriptor(
        identifier=PackageManagerId.DNF,
        probe_command="dnf",
        install_command_prefix="sudo dnf install -y",
        update_command_prefix="sudo dnf update -y",
        search_command_prefix="dnf search",
    ),
    PackageManagerId.YUM: PackageManagerDescriptor(
        identifier=PackageManagerId.YUM,
        probe_command="yum",
        install_command_prefix="sudo yum install -y",
        update_command_prefix="sudo yum update -y",
        search_command_prefix="yum search",
    ),
    PackageManagerId.PACMAN: PackageManagerDescriptor(
        identifier=PackageManagerId.PACMAN,
        probe_command="pacman",
        install_command_prefix="sudo pacman -S --noconfirm",
        update_command_prefix="sudo pacman -Syu --noconfirm",
        search_command_prefix="pacman -Ss",
    ),
    PackageManagerId.ZYPPER: PackageManagerDescriptor(
        identifier=PackageManagerId.ZYPPER,
        probe_command="zypper",
        install_command_prefix="sudo zypper install -y",
        update_command_prefix="sudo zypper update -y",
        search_command_prefix="zypper search",
    ),
}

# Distribution-native managers first.
_CANDIDATES: dict[OSFamily, tuple[PackageManagerId, ...]] = {
    OSFamily.MACOS: (PackageManagerId.HOMEBREW,),
    OSFamily.LINUX: (
        PackageManagerId.APT,
        PackageManagerId.DNF,
        PackageManagerId.YUM,
        PackageManagerId.PACMAN,
        PackageManagerId.ZYPPER,
    ),
}


def candidate_order(os_family: OSFamily) -> tuple[PackageManagerId, ...]:
    return _CANDIDATES.get(os_family, ())


def needs_bootstrap(os_family: OSFamily) -> bool:
    """Homebrew never ships with macOS; Linux managers always do."""
    return os_family == OSFamily.MACOS


def package_manager_install_command(os_family: OSFamily) -> str | None:
    if os_family == OSFamily.MACOS:
        return HOMEBREW_INSTALL_COMMAND
    return None


class PackageManagerRegistry:
    def __init__(self, probe: PlatformProbe, platform: PlatformDescriptor):
        self.probe = probe
        self.platform = platform

    async def detect_package_manager(self) -> PackageManagerDescriptor | None:
        """Return the first available manager in the OS priority order."""
        for identifier in candidate_order(self.platform.os_family):
            descriptor = PACKAGE_MANAGERS[identifier]
            if await self.probe.command_exists(descriptor.probe_command):
                _logging.debug(f"Detected package manager: {identifier.value}")
                return replace(descriptor, is_available=True)

        _logging.debug(
            f"No package manager found for {self.platform.os_family.value}"
        )
        return None


__all__ = [
    "HOMEBREW_INSTALL_COMMAND",
    "PACKAGE_MANAGERS",
    "PackageManagerRegistry",
    "candidate_order",
    "needs_bootstrap",
    "package_manager_install_command",
]
