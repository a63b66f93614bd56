"""Pytest fixtures and utilities for devenv tests."""

from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from devenv.config import Settings
from devenv.data_loader import clear_cache
from devenv.execution import CommandOutcome
from devenv.installer import (
    EnvironmentValidator,
    Installer,
    InstallMethod,
    InstallStrategy,
    PackageManagerId,
    PackageManagerRegistry,
    ShellProfileConfigurator,
    ToolCatalog,
    ToolCategory,
    ToolDescriptor,
)
from devenv.platform import OSFamily, PlatformDescriptor, PlatformProbe
from devenv.runtime import DevEnv

NOT_SCRIPTED = CommandOutcome(
    stdout="", stderr="", succeeded=False, failure_reason="Command failed with exit code 1: "
)


class FakeCommandRunner:
    """CommandRunner returning scripted outcomes keyed by exact command text.

    A list of outcomes is consumed one per call; the last one repeats.
    Unscripted commands fail.
    """

    def __init__(self):
        self.outcomes: dict[str, list[CommandOutcome]] = {}
        self.calls: list[tuple[str, int]] = []

    def script(
        self,
        command: str,
        stdout: str = "",
        stderr: str = "",
        succeeded: bool = True,
        failure_reason: str | None = None,
    ) -> None:
        outcome = CommandOutcome(stdout, stderr, succeeded, failure_reason)
        self.outcomes.setdefault(command, []).append(outcome)

    def fail(self, command: str, stderr: str = "boom", exit_code: int = 1) -> None:
        self.script(
            command,
            stderr=stderr,
            succeeded=False,
            failure_reason=f"Command failed with exit code {exit_code}: {stderr}",
        )

    def tool_exists(self, name: str) -> None:
        self.script(f"which {name}", stdout=f"/usr/bin/{name}\n")

    def tool_missing(self, name: str) -> None:
        self.fail(f"which {name}", stderr="")

    async def run(self, command, *, timeout=60, cwd=None):
        self.calls.append((command, timeout))
        queued = self.outcomes.get(command)
        if not queued:
            return NOT_SCRIPTED
        if len(queued) > 1:
            return queued.pop(0)
        return queued[0]

    @property
    def commands(self) -> list[str]:
        return [c for c, _ in self.calls]

    def timeout_for(self, command: str) -> int:
        return next(t for c, t in self.calls if c == command)

    def install_commands(self) -> list[str]:
        """Every non-probe command that was run."""
        return [c for c in self.commands if not c.startswith("which ")]


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Generator[Path, None, None]:
    """Point HOME and NVM_DIR at a temp directory for every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("NVM_DIR", str(home / ".nvm"))
    monkeypatch.delenv("DEVENV_CONFIG", raising=False)
    clear_cache()
    yield home
    clear_cache()


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def linux_platform() -> PlatformDescriptor:
    return PlatformDescriptor(OSFamily.LINUX, "linux", "x86_64")


@pytest.fixture
def macos_platform() -> PlatformDescriptor:
    return PlatformDescriptor(OSFamily.MACOS, "darwin", "arm64")


def _apt(package: str, **kwargs) -> dict[PackageManagerId, InstallMethod]:
    return {PackageManagerId.APT: InstallMethod(PackageManagerId.APT, package, **kwargs)}


@pytest.fixture
def catalog() -> ToolCatalog:
    """Minimal fixture catalog covering every install strategy."""
    tools = [
        ToolDescriptor(
            canonical_name="python",
            display_name="Python",
            category=ToolCategory.LANGUAGE,
            verify_command="python3",
            install_methods={
                PackageManagerId.APT: InstallMethod(PackageManagerId.APT, "python3"),
                PackageManagerId.HOMEBREW: InstallMethod(
                    PackageManagerId.HOMEBREW,
                    "python@3",
                    post_install_steps=("python3 -m ensurepip --upgrade",),
                ),
            },
        ),
        ToolDescriptor(
            canonical_name="git",
            display_name="Git",
            category=ToolCategory.PACKAGE_MANAGER,
            verify_command="git",
            install_methods=_apt("git"),
        ),
        ToolDescriptor(
            canonical_name="go",
            display_name="Go",
            category=ToolCategory.LANGUAGE,
            verify_command="go",
            version_flag="version",
            environment_variables={"GOPATH": "$HOME/go"},
            install_methods=_apt("golang"),
        ),
        ToolDescriptor(
            canonical_name="docker",
            display_name="Docker",
            category=ToolCategory.RUNTIME,
            verify_command="docker",
            manual_install_url="https://docs.docker.com/engine/install/",
            install_methods=_apt(
                "docker.io",
                alternate_commands=("get-docker.sh", "sudo snap install docker"),
                post_install_steps=("sudo systemctl start docker", "sudo usermod -aG docker $USER"),
            ),
        ),
        ToolDescriptor(
            canonical_name="flutter",
            display_name="Flutter",
            category=ToolCategory.SDK,
            verify_command="flutter",
            manual_install_url="https://flutter.dev/docs/get-started/install",
            install_methods={
                PackageManagerId.HOMEBREW: InstallMethod(PackageManagerId.HOMEBREW, "--cask flutter")
            },
        ),
        ToolDescriptor(
            canonical_name="java",
            display_name="Java",
            category=ToolCategory.LANGUAGE,
            verify_command="java",
            version_flag="-version",
            install_methods=_apt("openjdk-17-jdk"),
        ),
        ToolDescriptor(
            canonical_name="nvm",
            display_name="nvm",
            category=ToolCategory.VERSION_MANAGER,
            verify_command="nvm",
            strategy=InstallStrategy.BOOTSTRAP_SCRIPT,
            verify_path="{nvm_dir}/nvm.sh",
            bootstrap_command="curl -o- https://nvm.example/install.sh | bash",
            environment_variables={"NVM_DIR": "$HOME/.nvm"},
            shell_profile_snippet='[ -s "$NVM_DIR/nvm.sh" ] && \\. "$NVM_DIR/nvm.sh"',
        ),
        ToolDescriptor(
            canonical_name="nodejs",
            display_name="Node.js",
            category=ToolCategory.RUNTIME,
            verify_command="node",
            strategy=InstallStrategy.VERSION_MANAGED,
            prerequisites=("nvm",),
            version_install_command="nvm-install {version}",
            install_methods=_apt("nodejs npm"),
        ),
        ToolDescriptor(
            canonical_name="android",
            display_name="Android Studio",
            category=ToolCategory.SDK,
            verify_command="android",
            strategy=InstallStrategy.IDE_BUNDLE,
            prerequisites=("java",),
            snap_package="android-studio",
            manual_install_url="https://developer.android.com/studio",
            environment_variables={"ANDROID_HOME": "$HOME/Android/Sdk"},
            install_methods={
                PackageManagerId.HOMEBREW: InstallMethod(
                    PackageManagerId.HOMEBREW, "--cask android-studio"
                )
            },
        ),
    ]
    return ToolCatalog({t.canonical_name: t for t in tools})


@pytest.fixture
def profile_path(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".bashrc"


@pytest.fixture
def make_env(fake_runner, catalog, linux_platform, profile_path):
    """Factory for a fully wired DevEnv around the fake runner."""

    def _create(platform: PlatformDescriptor | None = None, settings: Settings | None = None) -> DevEnv:
        platform = platform or linux_platform
        settings = settings or Settings()
        probe = PlatformProbe(fake_runner, timeout=settings.probe_timeout, platform=platform)
        registry = PackageManagerRegistry(probe, platform)
        configurator = ShellProfileConfigurator(profile_path)
        installer = Installer(
            catalog=catalog,
            runner=fake_runner,
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
            runner=fake_runner,
            probe=probe,
            registry=registry,
            catalog=catalog,
            configurator=configurator,
            installer=installer,
            validator=validator,
        )

    return _create


@pytest.fixture
def env(make_env) -> DevEnv:
    return make_env()


@pytest.fixture
def mock_tty() -> Generator[None, None, None]:
    """Mock sys.stdin.isatty to return True."""
    with patch("sys.stdin.isatty", return_value=True):
        yield


@pytest.fixture
def mock_no_tty() -> Generator[None, None, None]:
    """Mock sys.stdin.isatty to return False."""
    with patch("sys.stdin.isatty", return_value=False):
        yield
