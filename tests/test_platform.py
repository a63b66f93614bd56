"""Tests for platform detection and probing."""

from pathlib import Path

import pytest

from devenv.paths import (
    expand_path_template,
    get_config_path,
    get_home_directory,
    get_nvm_dir,
)
from devenv.platform import (
    OSFamily,
    PlatformDescriptor,
    PlatformProbe,
    detect_platform,
    is_supported,
    shell_profile_path,
)


@pytest.mark.parametrize(
    "name, family",
    [
        ("darwin", OSFamily.MACOS),
        ("linux", OSFamily.LINUX),
        ("linux2", OSFamily.LINUX),
        ("win32", OSFamily.WINDOWS),
        ("cygwin", OSFamily.WINDOWS),
        ("freebsd13", OSFamily.UNKNOWN),
    ],
)
def test_detect_platform(name, family):
    descriptor = detect_platform(name, "x86_64")
    assert descriptor.os_family == family
    assert descriptor.raw_platform_name == name
    assert descriptor.architecture == "x86_64"


def test_detect_platform_defaults_to_host():
    descriptor = detect_platform()
    assert descriptor.raw_platform_name
    assert descriptor.architecture


def test_is_supported():
    assert is_supported(detect_platform("darwin", "arm64"))
    assert is_supported(detect_platform("linux", "x86_64"))
    assert not is_supported(detect_platform("win32", "AMD64"))
    assert not is_supported(detect_platform("sunos5", "sparc"))


class TestShellProfilePath:
    home = Path("/home/dev")

    def test_zsh(self):
        assert shell_profile_path("/bin/zsh", OSFamily.LINUX, self.home) == self.home / ".zshrc"

    def test_bash_on_linux(self):
        assert shell_profile_path("/bin/bash", OSFamily.LINUX, self.home) == self.home / ".bashrc"

    def test_bash_on_macos(self):
        assert (
            shell_profile_path("/bin/bash", OSFamily.MACOS, self.home)
            == self.home / ".bash_profile"
        )

    def test_other_shell(self):
        assert shell_profile_path("/usr/bin/fish", OSFamily.LINUX, self.home) == self.home / ".profile"

    def test_reads_shell_env(self, monkeypatch, isolated_home):
        monkeypatch.setenv("SHELL", "/usr/local/bin/zsh")
        assert shell_profile_path(os_family=OSFamily.LINUX) == isolated_home / ".zshrc"


class TestPaths:
    def test_home_prefers_home(self, isolated_home):
        assert get_home_directory() == isolated_home

    def test_home_falls_back_to_userprofile(self, monkeypatch):
        monkeypatch.delenv("HOME")
        monkeypatch.setenv("USERPROFILE", "C:/Users/dev")
        assert get_home_directory() == Path("C:/Users/dev")

    def test_nvm_dir_default(self, monkeypatch, isolated_home):
        monkeypatch.delenv("NVM_DIR")
        assert get_nvm_dir() == isolated_home / ".nvm"

    def test_config_path_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DEVENV_CONFIG", str(tmp_path / "custom.json"))
        assert get_config_path() == tmp_path / "custom.json"

    def test_config_path_default(self, isolated_home):
        assert get_config_path() == isolated_home / ".config" / "devenv" / "config.json"


class TestPlatformProbe:
    @pytest.mark.asyncio
    async def test_command_exists(self, fake_runner):
        fake_runner.tool_exists("git")
        probe = PlatformProbe(fake_runner)

        assert await probe.command_exists("git")
        assert not await probe.command_exists("hg")
        assert fake_runner.timeout_for("which git") == 10

    @pytest.mark.asyncio
    async def test_command_exists_needs_output(self, fake_runner):
        fake_runner.script("which ghost", stdout="   ")
        probe = PlatformProbe(fake_runner)

        assert not await probe.command_exists("ghost")

    @pytest.mark.asyncio
    async def test_command_name_is_quoted(self, fake_runner):
        probe = PlatformProbe(fake_runner)

        await probe.command_exists("rm -rf")

        assert fake_runner.commands == ["which 'rm -rf'"]

    @pytest.mark.asyncio
    async def test_resolve_version_first_line(self, fake_runner):
        fake_runner.script("go version", stdout="go version go1.22.0 linux/amd64\nextra")
        probe = PlatformProbe(fake_runner)

        assert await probe.resolve_version("go", "version") == "go version go1.22.0 linux/amd64"

    @pytest.mark.asyncio
    async def test_resolve_version_failure(self, fake_runner):
        probe = PlatformProbe(fake_runner)

        assert await probe.resolve_version("node") is None

    @pytest.mark.asyncio
    async def test_resolve_version_empty_output(self, fake_runner):
        fake_runner.script("node --version", stdout="")
        probe = PlatformProbe(fake_runner)

        assert await probe.resolve_version("node") is None

    @pytest.mark.asyncio
    async def test_detect_distribution(self, fake_runner):
        fake_runner.script(
            "cat /etc/os-release",
            stdout='PRETTY_NAME="Ubuntu 24.04 LTS"\nNAME="Ubuntu"\nVERSION_ID="24.04"',
        )
        probe = PlatformProbe(
            fake_runner, platform=PlatformDescriptor(OSFamily.LINUX, "linux", "x86_64")
        )

        assert await probe.detect_distribution() == "Ubuntu"

    @pytest.mark.asyncio
    async def test_detect_distribution_not_linux(self, fake_runner):
        probe = PlatformProbe(
            fake_runner, platform=PlatformDescriptor(OSFamily.MACOS, "darwin", "arm64")
        )

        assert await probe.detect_distribution() is None
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_is_present_on_path(self, fake_runner, tmp_path):
        fake_runner.tool_exists("git")
        probe = PlatformProbe(fake_runner)

        assert await probe.is_present("git", str(tmp_path / "missing"))

    @pytest.mark.asyncio
    async def test_is_present_by_marker_file(self, fake_runner, tmp_path):
        marker = tmp_path / "nvm.sh"
        marker.write_text("# nvm\n")
        probe = PlatformProbe(fake_runner)

        assert await probe.is_present("nvm", str(marker))
        assert not await probe.is_present("nvm", str(tmp_path / "other.sh"))
        assert not await probe.is_present("nvm")


def test_expand_path_template(isolated_home):
    expanded = expand_path_template("{nvm_dir}/nvm.sh {home} v{version}", version="20")

    assert expanded == f"{get_nvm_dir()}/nvm.sh {isolated_home} v20"
