"""Tests for package manager detection."""

import pytest

from devenv.installer import PackageManagerId, PackageManagerRegistry
from devenv.installer.package_managers import (
    HOMEBREW_INSTALL_COMMAND,
    PACKAGE_MANAGERS,
    candidate_order,
    needs_bootstrap,
    package_manager_install_command,
)
from devenv.platform import OSFamily, PlatformDescriptor, PlatformProbe


def test_candidate_order():
    assert candidate_order(OSFamily.MACOS) == (PackageManagerId.HOMEBREW,)
    assert candidate_order(OSFamily.LINUX) == (
        PackageManagerId.APT,
        PackageManagerId.DNF,
        PackageManagerId.YUM,
        PackageManagerId.PACMAN,
        PackageManagerId.ZYPPER,
    )
    assert candidate_order(OSFamily.WINDOWS) == ()


def test_bootstrap_only_on_macos():
    assert needs_bootstrap(OSFamily.MACOS)
    assert not needs_bootstrap(OSFamily.LINUX)
    assert package_manager_install_command(OSFamily.MACOS) == HOMEBREW_INSTALL_COMMAND
    assert package_manager_install_command(OSFamily.LINUX) is None


def test_every_manager_has_commands():
    for identifier, descriptor in PACKAGE_MANAGERS.items():
        assert descriptor.identifier == identifier
        assert descriptor.install_command_prefix
        assert descriptor.update_command_prefix
        assert descriptor.search_command_prefix
        assert not descriptor.is_available


@pytest.mark.asyncio
async def test_detects_first_available_linux_manager(fake_runner, linux_platform):
    fake_runner.tool_exists("dnf")
    fake_runner.tool_exists("yum")
    registry = PackageManagerRegistry(PlatformProbe(fake_runner), linux_platform)

    manager = await registry.detect_package_manager()

    assert manager.identifier == PackageManagerId.DNF
    assert manager.name == "dnf"
    assert manager.is_available
    assert manager.install_command_prefix == "sudo dnf install -y"
    # Probing stops at the first hit.
    assert fake_runner.commands == ["which apt-get", "which dnf"]


@pytest.mark.asyncio
async def test_detects_homebrew(fake_runner, macos_platform):
    fake_runner.tool_exists("brew")
    registry = PackageManagerRegistry(PlatformProbe(fake_runner), macos_platform)

    manager = await registry.detect_package_manager()

    assert manager.identifier == PackageManagerId.HOMEBREW
    assert manager.install_command_prefix == "brew install"


@pytest.mark.asyncio
async def test_none_found(fake_runner, linux_platform):
    registry = PackageManagerRegistry(PlatformProbe(fake_runner), linux_platform)

    assert await registry.detect_package_manager() is None
    assert len(fake_runner.calls) == 5


@pytest.mark.asyncio
async def test_unsupported_os_probes_nothing(fake_runner):
    platform = PlatformDescriptor(OSFamily.WINDOWS, "win32", "AMD64")
    registry = PackageManagerRegistry(PlatformProbe(fake_runner), platform)

    assert await registry.detect_package_manager() is None
    assert fake_runner.calls == []
