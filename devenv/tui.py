"""Terminal UI helpers.

questionary is used for interactive prompts when a TTY is available; click
output covers CI and headless runs.
"""

import sys

import click
import questionary

from devenv.installer import InstallationResult, SystemStatus, ToolStatus


def format_status_line(status: ToolStatus, max_name_width: int = 14) -> str:
    icon = "✅" if status.is_installed else "❌"
    name = status.display_name.ljust(max_name_width)
    if not status.is_installed:
        return f"{icon} {name}  not installed"
    return f"{icon} {name}  {status.detected_version or 'unknown version'}"


def display_status_table(statuses: list[ToolStatus]) -> None:
    if not statuses:
        click.echo("No tools in catalog.")
        return

    width = max(len(s.display_name) for s in statuses)
    for status in statuses:
        click.secho(
            format_status_line(status, width),
            fg="green" if status.is_installed else "red",
        )


def display_system_status(status: SystemStatus, recommendations: list[str]) -> None:
    platform = status.platform
    click.echo(f"OS: {platform.os_family.value} ({platform.architecture})")
    if status.package_manager:
        click.echo(f"Package manager: {status.package_manager.name}")
    else:
        click.echo("Package manager: none detected")
    click.echo("")

    display_status_table(status.tools)
    click.echo(f"\n{len(status.installed)} installed, {len(status.missing)} missing")

    if recommendations:
        click.echo("\nRecommendations:")
        for recommendation in recommendations:
            click.echo(f"  • {recommendation}")


def display_result(name: str, result: InstallationResult) -> None:
    """Print one install result, with details on failure."""
    if result.succeeded:
        click.echo(f"✅ {name}: {result.message}")
    else:
        click.echo(f"❌ {name}: {result.message}")
        if result.details:
            click.echo(f"   {result.details}")

    if result.requires_shell_restart:
        click.echo("   Restart your shell (or source your profile) to use it.")


def select_tools_interactive(
    names: list[str], display_names: dict[str, str]
) -> list[str] | None:
    """Checkbox selection of tools to install, all pre-checked.

    Returns:
        The selected names in the given order, or None if the user cancels.

    Raises:
        RuntimeError: If not running in a TTY
    """
    if not sys.stdin.isatty():
        raise RuntimeError("Interactive tool selector requires a TTY")

    if not names:
        return []

    choices = [
        questionary.Choice(title=display_names.get(n, n), value=n, checked=True)
        for n in names
    ]

    try:
        selected = questionary.checkbox(
            "Select tools to install:",
            choices=choices,
            instruction="Space to toggle, Enter to confirm",
        ).ask()
    except KeyboardInterrupt:
        return None

    if selected is None:
        return None
    return [n for n in names if n in selected]


__all__ = [
    "display_result",
    "display_status_table",
    "display_system_status",
    "format_status_line",
    "select_tools_interactive",
]
