"""Tool installation orchestration.

Every tool install walks the same sequence: resolve the catalog entry,
short-circuit if already present, select a package manager, look up its
install method, run the primary command (then alternates), run post-install
steps, write shell profile configuration, and verify. Public coroutines never
raise for expected failures; they always return an InstallationResult.
"""

import logging
from devenv.config import Settings, is_version_safe
from devenv.errors import format_manual_install, format_prerequisite_failure
from devenv.execution import CommandRunner
from devenv.paths import expand_path_template
from devenv.platform import OSFamily, PlatformDescriptor, PlatformProbe

from .catalog import ToolCatalog
from .models import (
    InstallationResult,
    InstallOutcome,
    InstallStrategy,
    PackageManagerDescriptor,
    ToolDescriptor,
)
from .package_managers import (
    PackageManagerRegistry,
    needs_bootstrap,
    package_manager_install_command,
)
from .profile import ShellProfileConfigurator

_logging = logging.getLogger(__name__)

NO_PACKAGE_MANAGER_MESSAGE = (
    "No package manager available. Please install a package manager first."
)
RESTART_HINT = "The tool may require a shell restart to be available"


class Installer:
    def __init__(
        self,
        catalog: ToolCatalog,
        runner: CommandRunner,
        probe: PlatformProbe,
        registry: PackageManagerRegistry,
        platform: PlatformDescriptor,
        configurator: ShellProfileConfigurator,
        settings: Settings | None = None,
    ):
        self.catalog = catalog
        self.runner = runner
        self.probe = probe
        self.registry = registry
        self.platform = platform
        self.configurator = configurator
        self.settings = settings or Settings()

    async def install_tool(
        self, name: str, version: str | None = None
    ) -> InstallationResult:
        outcome = await self.install_tool_with_warnings(name, version)
        return outcome.result

    async def install_tool_with_warnings(
        self, name: str, version: str | None = None
    ) -> InstallOutcome:
        """Install one tool and report the best-effort failures it absorbed."""
        descriptor = self.catalog.get(name)
        if descriptor is None:
            return InstallOutcome(
                InstallationResult(succeeded=False, message=f"Unknown tool: {name}")
            )
        if version and not is_version_safe(version):
            return InstallOutcome(
                InstallationResult(
                    succeeded=False,
                    message=f"Invalid version for {descriptor.display_name}: {version!r}",
                )
            )

        warnings: list[str] = []
        try:
            result = await self._install(descriptor, version, warnings)
        except Exception as e:
            _logging.exception(f"Unexpected error installing {name}")
            result = InstallationResult(
                succeeded=False,
                message=f"Error installing {descriptor.display_name}: {e}",
            )
        return InstallOutcome(result, warnings)

    async def install_multiple_tools(
        self, names: list[str]
    ) -> dict[str, InstallationResult]:
        """Install tools one after another; a failure never stops the rest."""
        results: dict[str, InstallationResult] = {}
        for name in names:
            results[name] = await self.install_tool(name)
        return results

    async def install_nvm(self) -> InstallationResult:
        return await self.install_tool("nvm")

    async def install_package_manager(self) -> InstallationResult:
        os_family = self.platform.os_family

        if not needs_bootstrap(os_family):
            manager = await self.registry.detect_package_manager()
            if manager:
                return InstallationResult(
                    succeeded=True,
                    message=f"Package manager {manager.name} is already available",
                )
            return InstallationResult(
                succeeded=False,
                message="No package manager detected and none can be auto-installed for this OS",
            )

        existing = await self.registry.detect_package_manager()
        if existing:
            return InstallationResult(
                succeeded=True, message=f"{existing.name} is already installed"
            )

        command = package_manager_install_command(os_family)
        if not command:
            return InstallationResult(
                succeeded=False,
                message="Cannot determine package manager installation command",
            )

        outcome = await self.runner.run(command, timeout=self.settings.install_timeout)

        manager = await self.registry.detect_package_manager()
        if manager:
            return InstallationResult(
                succeeded=True,
                message=f"{manager.name} installed successfully",
                details=outcome.stdout,
                requires_shell_restart=True,
            )

        return InstallationResult(
            succeeded=False,
            message="Failed to install package manager",
            details=outcome.details,
        )

    async def _install(
        self, descriptor: ToolDescriptor, version: str | None, warnings: list[str]
    ) -> InstallationResult:
        if await self._is_present(descriptor):
            return InstallationResult(
                succeeded=True, message=f"{descriptor.display_name} is already installed"
            )

        if descriptor.strategy == InstallStrategy.BOOTSTRAP_SCRIPT:
            return await self._install_bootstrap_script(descriptor, warnings)
        if descriptor.strategy == InstallStrategy.VERSION_MANAGED:
            return await self._install_version_managed(descriptor, version, warnings)
        if descriptor.strategy == InstallStrategy.IDE_BUNDLE:
            return await self._install_ide_bundle(descriptor, warnings)

        if version:
            _logging.debug(
                f"Version {version} ignored for {descriptor.canonical_name}: "
                "package managers install their packaged version"
            )
        return await self._install_from_catalog(descriptor, warnings)

    async def _install_from_catalog(
        self, descriptor: ToolDescriptor, warnings: list[str]
    ) -> InstallationResult:
        manager = await self.registry.detect_package_manager()
        if manager is None:
            return InstallationResult(succeeded=False, message=NO_PACKAGE_MANAGER_MESSAGE)

        method = descriptor.install_method_for(manager.identifier)
        if method is None:
            return InstallationResult(
                succeeded=False,
                message=f"{descriptor.display_name} installation not supported on {manager.name}",
                details=format_manual_install(descriptor.manual_install_url),
            )

        succeeded, details = await self._run_with_fallback(
            self._package_command(manager, method.package_specifier),
            method.alternate_commands,
        )
        if not succeeded:
            return InstallationResult(
                succeeded=False,
                message=f"Failed to install {descriptor.display_name}",
                details=details,
            )

        await self._run_post_install(method.post_install_steps, warnings)
        needs_restart = self._configure_shell(descriptor, warnings)
        return await self._verify(descriptor, details, needs_restart)

    async def _install_bootstrap_script(
        self, descriptor: ToolDescriptor, warnings: list[str]
    ) -> InstallationResult:
        outcome = await self.runner.run(
            descriptor.bootstrap_command or "",
            timeout=self.settings.version_manager_timeout,
        )
        if not outcome.succeeded and not await self._is_present(descriptor):
            return InstallationResult(
                succeeded=False,
                message=f"Failed to install {descriptor.display_name}",
                details=outcome.details,
            )

        self._configure_shell(descriptor, warnings)
        # Shell functions are only loaded by a fresh shell.
        return await self._verify(descriptor, outcome.stdout, needs_restart=True)

    async def _install_version_managed(
        self, descriptor: ToolDescriptor, version: str | None, warnings: list[str]
    ) -> InstallationResult:
        version = version or self.settings.default_node_version
        needs_restart = False
        manager_names = []

        for prereq in descriptor.prerequisites:
            prereq_outcome = await self.install_tool_with_warnings(prereq)
            warnings.extend(prereq_outcome.warnings)
            if not prereq_outcome.result.succeeded:
                message = (
                    f"{prereq} bootstrap failed ({prereq_outcome.result.message}), "
                    "falling back to package manager"
                )
                _logging.warning(message)
                warnings.append(message)
                return await self._install_from_catalog(descriptor, warnings)
            needs_restart = needs_restart or prereq_outcome.result.requires_shell_restart
            prereq_descriptor = self.catalog.get(prereq)
            manager_names.append(prereq_descriptor.display_name if prereq_descriptor else prereq)

        command = self._expand(descriptor.version_install_command or "", version=version)
        outcome = await self.runner.run(
            command, timeout=self.settings.version_manager_timeout
        )
        via = " and ".join(manager_names)

        if outcome.succeeded or await self._is_present(descriptor):
            return InstallationResult(
                succeeded=True,
                message=f"{descriptor.display_name} {version} installed successfully via {via}",
                details=outcome.stdout,
                requires_shell_restart=needs_restart,
            )

        return InstallationResult(
            succeeded=False,
            message=f"Failed to install {descriptor.display_name} via {via}",
            details=outcome.details,
        )

    async def _install_ide_bundle(
        self, descriptor: ToolDescriptor, warnings: list[str]
    ) -> InstallationResult:
        manager = await self.registry.detect_package_manager()
        if manager is None:
            return InstallationResult(succeeded=False, message=NO_PACKAGE_MANAGER_MESSAGE)

        for prereq in descriptor.prerequisites:
            prereq_outcome = await self.install_tool_with_warnings(prereq)
            warnings.extend(prereq_outcome.warnings)
            if not prereq_outcome.result.succeeded:
                prereq_descriptor = self.catalog.get(prereq)
                prereq_name = prereq_descriptor.display_name if prereq_descriptor else prereq
                return InstallationResult(
                    succeeded=False,
                    message=format_prerequisite_failure(prereq_name, descriptor.display_name),
                    details=prereq_outcome.result.details,
                )

        method = descriptor.install_method_for(manager.identifier)
        post_install_steps: tuple[str, ...] = ()
        if method is not None:
            succeeded, details = await self._run_with_fallback(
                self._package_command(manager, method.package_specifier),
                method.alternate_commands,
            )
            post_install_steps = method.post_install_steps
        elif (
            self.platform.os_family == OSFamily.LINUX
            and descriptor.snap_package
            and await self.probe.command_exists("snap")
        ):
            outcome = await self.runner.run(
                f"sudo snap install {descriptor.snap_package} --classic",
                timeout=self.settings.install_timeout,
            )
            succeeded, details = outcome.succeeded, outcome.details
        else:
            return InstallationResult(
                succeeded=False,
                message=(
                    f"{descriptor.display_name} installation requires manual setup "
                    "on this system"
                ),
                details=format_manual_install(descriptor.manual_install_url),
            )

        if not succeeded:
            return InstallationResult(
                succeeded=False,
                message=f"Failed to install {descriptor.display_name}",
                details=details,
            )

        await self._run_post_install(post_install_steps, warnings)
        needs_restart = self._configure_shell(descriptor, warnings)
        result = await self._verify(descriptor, details, needs_restart)
        if result.succeeded:
            result.message = (
                f"{descriptor.display_name} installed successfully. Please:\n"
                f"1. Open {descriptor.display_name}\n"
                "2. Complete the setup wizard\n"
                f"3. Install the SDK components via {descriptor.display_name}"
            )
        return result

    async def _run_with_fallback(
        self, primary: str, alternates: tuple[str, ...]
    ) -> tuple[bool, str]:
        """Run primary, then alternates in order until one succeeds.

        On total failure the primary's error is returned.
        """
        timeout = self.settings.install_timeout
        primary_outcome = await self.runner.run(primary, timeout=timeout)
        if primary_outcome.succeeded:
            return True, primary_outcome.stdout

        _logging.debug(f"Primary install command failed: {primary_outcome.details}")
        for command in alternates:
            outcome = await self.runner.run(command, timeout=timeout)
            if outcome.succeeded:
                return True, outcome.stdout
            _logging.debug(f"Alternate install command failed: {command}")

        return False, primary_outcome.details

    async def _run_post_install(self, steps: tuple[str, ...], warnings: list[str]) -> None:
        for step in steps:
            outcome = await self.runner.run(
                step, timeout=self.settings.post_install_timeout
            )
            if not outcome.succeeded:
                message = f"Post-install step failed: {step}: {outcome.details}"
                _logging.warning(message)
                warnings.append(message)

    def _configure_shell(self, descriptor: ToolDescriptor, warnings: list[str]) -> bool:
        if not descriptor.needs_shell_configuration:
            return False
        try:
            return self.configurator.apply_configuration(descriptor)
        except OSError as e:
            message = (
                f"Failed to configure shell for {descriptor.display_name}: {e}"
            )
            _logging.warning(message)
            warnings.append(message)
            return False

    async def _verify(
        self, descriptor: ToolDescriptor, details: str, needs_restart: bool
    ) -> InstallationResult:
        verified = await self._is_present(descriptor)
        if verified or needs_restart:
            return InstallationResult(
                succeeded=True,
                message=f"{descriptor.display_name} installed successfully",
                details=details,
                requires_shell_restart=needs_restart,
            )

        return InstallationResult(
            succeeded=False,
            message=f"{descriptor.display_name} installation completed but verification failed",
            details=RESTART_HINT,
            requires_shell_restart=True,
        )

    async def _is_present(self, descriptor: ToolDescriptor) -> bool:
        return await self.probe.is_present(
            descriptor.verify_command, descriptor.expanded_verify_path
        )

    @staticmethod
    def _package_command(manager: PackageManagerDescriptor, package: str) -> str:
        return f"{manager.install_command_prefix} {package}"

    @staticmethod
    def _expand(template: str, version: str | None = None) -> str:
        return expand_path_template(template, version=version)


__all__ = ["Installer", "NO_PACKAGE_MANAGER_MESSAGE", "RESTART_HINT"]
