"""Wiring of the installer services for the CLI and the MCP server.

Tests construct DevEnv directly with a fake CommandRunner instead.
"""

from dataclasses import dataclass

from devenv.config import Settings, load_settings
from devenv.data_loader import parse_tools
from devenv.execution import CommandRunner, ShellCommandRunner
from devenv.installer import (
    EnvironmentValidator,
    Installer,
    PackageManagerRegistry,
    ShellProfileConfigurator,
    ToolCatalog,
)
from devenv.platform import PlatformDescriptor, PlatformProbe, detect_platform, shell_profile_path


@dataclass
class DevEnv:
    platform: PlatformDescriptor
    settings: Settings
    runner: CommandRunner
    probe: PlatformProbe
    registry: PackageManagerRegistry
    catalog: ToolCatalog
    configurator: ShellProfileConfigurator
    installer: Installer
    validator: EnvironmentValidator


def create_environment(
    settings: Settings | None = None,
    runner: CommandRunner | None = None,
    platform: PlatformDescriptor | None = None,
    debug: bool = False,
) -> DevEnv:
    """Build every service with production defaults.

    Raises:
        ConfigError: If the settings file or the tool catalog is invalid.
    """
    if settings is None:
        settings = load_settings()
    if runner is None:
        runner = ShellCommandRunner(debug=debug)
    if platform is None:
        platform = detect_platform()

    probe = PlatformProbe(runner, timeout=settings.probe_timeout, platform=platform)
    registry = PackageManagerRegistry(probe, platform)
    catalog = ToolCatalog.builtin(parse_tools(settings.tools, source="settings"))
    profile = settings.shell_profile or shell_profile_path(os_family=platform.os_family)
    configurator = ShellProfileConfigurator(profile)

    installer = Installer(
        catalog=catalog,
        runner=runner,
        probe=probe,
        registry=registry,
        platform=platform,
        configurator=configurator,
        settings=settings,
    )
    validator = EnvironmentValidator(catalog, probe, registry, platform)

    return DevEnv(
        platform=platform,
        settings=settings,
        runner=runner,
        probe=probe,
        registry=registry,
        catalog=catalog,
        configurator=configurator,
        installer=installer,
        validator=validator,
    )


__all__ = ["DevEnv", "create_environment"]
