"""Data models for the installation system."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from devenv.paths import expand_path_template
from devenv.platform import PlatformDescriptor


class ToolCategory(Enum):
    LANGUAGE = "language"
    RUNTIME = "runtime"
    SDK = "sdk"
    PACKAGE_MANAGER = "package_manager"
    VERSION_MANAGER = "version_manager"


class InstallStrategy(Enum):
    CATALOG = "catalog"
    BOOTSTRAP_SCRIPT = "bootstrap_script"
    VERSION_MANAGED = "version_managed"
    IDE_BUNDLE = "ide_bundle"


class PackageManagerId(Enum):
    HOMEBREW = "homebrew"
    APT = "apt"
    DNF = "dnf"
    YUM = "yum"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PackageManagerDescriptor:
    identifier: PackageManagerId
    probe_command: str
    install_command_prefix: str
    update_command_prefix: str
    search_command_prefix: str
    is_available: bool = False

    @property
    def name(self) -> str:
        return self.identifier.value


@dataclass(frozen=True)
class InstallMethod:
    target_package_manager: PackageManagerId
    package_specifier: str
    alternate_commands: tuple[str, ...] = ()
    post_install_steps: tuple[str, ...] = ()


@dataclass(frozen=True)
class ToolDescriptor:
    """Static catalog entry describing how to detect and install one tool."""
    canonical_name: str
    display_name: str
    category: ToolCategory
    verify_command: str
    description: str = ""
    version_flag: str = "--version"
    install_methods: dict[PackageManagerId, InstallMethod] = field(default_factory=dict)
    manual_install_url: str | None = None
    environment_variables: dict[str, str] = field(default_factory=dict)
    shell_profile_snippet: str | None = None
    strategy: InstallStrategy = InstallStrategy.CATALOG
    prerequisites: tuple[str, ...] = ()
    verify_path: str | None = None
    bootstrap_command: str | None = None
    version_install_command: str | None = None
    snap_package: str | None = None

    @property
    def needs_shell_configuration(self) -> bool:
        return bool(self.environment_variables or self.shell_profile_snippet)

    @property
    def expanded_verify_path(self) -> str | None:
        if not self.verify_path:
            return None
        return expand_path_template(self.verify_path)

    def install_method_for(self, manager: PackageManagerId) -> InstallMethod | None:
        return self.install_methods.get(manager)


@dataclass
class InstallationResult:
    succeeded: bool
    message: str
    details: str | None = None
    requires_shell_restart: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.succeeded,
            "message": self.message,
            "details": self.details,
            "needs_restart": self.requires_shell_restart,
        }


@dataclass
class InstallOutcome:
    """InstallationResult plus the best-effort failures absorbed on the way."""
    result: InstallationResult
    warnings: list[str] = field(default_factory=list)


@dataclass
class ToolStatus:
    canonical_name: str
    display_name: str
    is_installed: bool
    detected_version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.canonical_name,
            "display_name": self.display_name,
            "installed": self.is_installed,
            "version": self.detected_version,
        }


@dataclass
class Readiness:
    ready: bool
    missing: list[str] = field(default_factory=list)
    present: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"ready": self.ready, "missing": self.missing, "present": self.present}


@dataclass
class PackageManagerSummary:
    name: str
    available: bool


@dataclass
class SystemStatus:
    platform: PlatformDescriptor
    package_manager: PackageManagerSummary | None
    tools: list[ToolStatus] = field(default_factory=list)

    @property
    def installed(self) -> list[ToolStatus]:
        return [t for t in self.tools if t.is_installed]

    @property
    def missing(self) -> list[ToolStatus]:
        return [t for t in self.tools if not t.is_installed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "os": self.platform.os_family.value,
            "platform": self.platform.raw_platform_name,
            "arch": self.platform.architecture,
            "package_manager": (
                {
                    "name": self.package_manager.name,
                    "available": self.package_manager.available,
                }
                if self.package_manager
                else None
            ),
            "tools": [t.to_dict() for t in self.tools],
        }


__all__ = [
    "ToolCategory",
    "InstallStrategy",
    "PackageManagerId",
    "PackageManagerDescriptor",
    "InstallMethod",
    "ToolDescriptor",
    "InstallationResult",
    "InstallOutcome",
    "ToolStatus",
    "Readiness",
    "PackageManagerSummary",
    "SystemStatus",
]
