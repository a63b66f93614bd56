"""Install and install-all command implementations."""

import asyncio
import logging
import sys

import click

from devenv.errors import format_error, format_suggestion
from devenv.runtime import DevEnv
from devenv.tui import display_result, select_tools_interactive

from .utils import load_environment

_logging = logging.getLogger(__name__)

BASIC_TOOLS = ["git", "python", "nodejs"]

# Only the first lines of install output are shown.
MAX_DETAIL_LINES = 5


@click.command()
@click.argument("tool_name")
@click.option("--version", "version", help="Version to install (for tools that support it)")
@click.pass_context
def install(ctx, tool_name: str, version: str | None):
    """Install a development tool."""
    debug = ctx.obj.get("debug", False)
    env = load_environment(debug)

    if tool_name not in env.catalog:
        click.echo(
            format_suggestion(
                f"unknown tool '{tool_name}'",
                f"available tools: {', '.join(env.catalog.names())}",
            ),
            err=True,
        )
        sys.exit(1)

    try:
        succeeded = asyncio.run(run_install(env, tool_name, version))
    except Exception as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)

    if not succeeded:
        sys.exit(1)


async def run_install(env: DevEnv, tool_name: str, version: str | None) -> bool:
    click.echo(f"Installing {tool_name}...")
    outcome = await env.installer.install_tool_with_warnings(tool_name, version)
    result = outcome.result

    if result.succeeded:
        click.echo(f"✅ {result.message}")
        if result.details:
            click.echo("Details:")
            click.echo("\n".join(result.details.splitlines()[:MAX_DETAIL_LINES]))
    else:
        click.echo(f"❌ {result.message}")
        if result.details:
            click.echo(result.details)

    for warning in outcome.warnings:
        click.echo(f"⚠️  {warning}", err=True)

    if result.requires_shell_restart:
        click.echo("⚠️  Please restart your terminal for changes to take effect")

    return result.succeeded


@click.command(name="install-all")
@click.option("--skip", "-s", multiple=True, help="Tool to skip (repeatable)")
@click.option("--select", "select", is_flag=True, help="Choose tools interactively")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def install_all(ctx, skip: tuple[str, ...], select: bool, yes: bool):
    """Install the package manager and the basic tool set."""
    debug = ctx.obj.get("debug", False)
    env = load_environment(debug)

    tools = [t for t in BASIC_TOOLS if t not in skip]

    if select:
        display_names = {
            name: descriptor.display_name
            for name in tools
            if (descriptor := env.catalog.get(name))
        }
        try:
            selected = select_tools_interactive(tools, display_names)
        except RuntimeError as e:
            click.echo(format_error(str(e)), err=True)
            sys.exit(1)
        if selected is None:
            click.echo("Cancelled.")
            return
        tools = selected

    if not tools:
        click.echo("Nothing to install.")
        return

    if not yes and not click.confirm(f"Install {', '.join(tools)}?", default=True):
        click.echo("Cancelled.")
        return

    try:
        succeeded = asyncio.run(run_install_all(env, tools))
    except Exception as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)

    if not succeeded:
        sys.exit(1)


async def run_install_all(env: DevEnv, tools: list[str]) -> bool:
    click.echo("Step 1: Package Manager")
    pm_result = await env.installer.install_package_manager()
    if not pm_result.succeeded:
        display_result("package manager", pm_result)
        return False
    click.echo(f"✅ {pm_result.message}")

    click.echo("\nStep 2: Installing Tools")
    results = await env.installer.install_multiple_tools(tools)
    for name, result in results.items():
        display_result(name, result)

    failed = [name for name, result in results.items() if not result.succeeded]
    if failed:
        _logging.debug(f"Failed tools: {failed}")
        click.echo(f"\n{len(failed)} tool(s) failed: {', '.join(failed)}")
    else:
        click.echo("\nSetup complete!")
    click.echo("⚠️  Please restart your terminal for all changes to take effect")
    return True
