"""Installer engine for developer tool setup."""

from .catalog import ToolCatalog
from .models import (
    InstallationResult,
    InstallMethod,
    InstallOutcome,
    InstallStrategy,
    PackageManagerDescriptor,
    PackageManagerId,
    PackageManagerSummary,
    Readiness,
    SystemStatus,
    ToolCategory,
    ToolDescriptor,
    ToolStatus,
)
from .orchestrator import Installer
from .package_managers import PackageManagerRegistry
from .profile import ShellProfileConfigurator
from .validator import EnvironmentValidator, recommendations

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
    "ToolCatalog",
    "PackageManagerRegistry",
    "ShellProfileConfigurator",
    "Installer",
    "EnvironmentValidator",
    "recommendations",
]
