"""Read-only environment inspection."""

import asyncio
import logging

from devenv.platform import PlatformDescriptor, PlatformProbe

from .catalog import ToolCatalog
from .models import PackageManagerSummary, Readiness, SystemStatus, ToolStatus
from .package_managers import PackageManagerRegistry

_logging = logging.getLogger(__name__)

NO_PACKAGE_MANAGER_RECOMMENDATION = (
    "Install a package manager to easily manage development tools"
)

# Checked in this order against the missing tools of a SystemStatus.
MISSING_TOOL_RECOMMENDATIONS: tuple[tuple[str, str], ...] = (
    ("git", "Install Git for version control"),
    ("python", "Install Python for Python development"),
    ("nodejs", "Install Node.js for JavaScript/TypeScript development"),
    ("docker", "Install Docker for containerized development"),
    ("java", "Install Java for Java/Android development"),
)


class EnvironmentValidator:
    def __init__(
        self,
        catalog: ToolCatalog,
        probe: PlatformProbe,
        registry: PackageManagerRegistry,
        platform: PlatformDescriptor,
    ):
        self.catalog = catalog
        self.probe = probe
        self.registry = registry
        self.platform = platform

    async def check_tool(self, name: str) -> ToolStatus:
        descriptor = self.catalog.get(name)
        if descriptor is None:
            return ToolStatus(canonical_name=name, display_name=name, is_installed=False)

        installed = await self.probe.is_present(
            descriptor.verify_command, descriptor.expanded_verify_path
        )
        version = None
        if installed:
            version = await self.probe.resolve_version(
                descriptor.verify_command, descriptor.version_flag
            )

        _logging.debug(f"{name}: installed={installed} version={version}")
        return ToolStatus(
            canonical_name=name,
            display_name=descriptor.display_name,
            is_installed=installed,
            detected_version=version,
        )

    async def check_tools(self, names: list[str]) -> list[ToolStatus]:
        """Probe several tools concurrently; results keep the input order."""
        return list(await asyncio.gather(*(self.check_tool(n) for n in names)))

    async def check_all_tools(self) -> list[ToolStatus]:
        return await self.check_tools(self.catalog.names())

    async def system_status(self) -> SystemStatus:
        manager = await self.registry.detect_package_manager()
        summary = (
            PackageManagerSummary(name=manager.name, available=manager.is_available)
            if manager
            else None
        )
        return SystemStatus(
            platform=self.platform,
            package_manager=summary,
            tools=await self.check_all_tools(),
        )

    async def is_ready(self, required: list[str]) -> Readiness:
        statuses = await self.check_tools(required)
        missing = [s.canonical_name for s in statuses if not s.is_installed]
        present = [s.canonical_name for s in statuses if s.is_installed]
        return Readiness(ready=not missing, missing=missing, present=present)


def recommendations(status: SystemStatus) -> list[str]:
    result = []
    if status.package_manager is None:
        result.append(NO_PACKAGE_MANAGER_RECOMMENDATION)

    missing = {t.canonical_name for t in status.missing}
    for name, suggestion in MISSING_TOOL_RECOMMENDATIONS:
        if name in missing:
            result.append(suggestion)
    return result


__all__ = [
    "EnvironmentValidator",
    "MISSING_TOOL_RECOMMENDATIONS",
    "NO_PACKAGE_MANAGER_RECOMMENDATION",
    "recommendations",
]
