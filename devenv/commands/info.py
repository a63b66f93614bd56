"""Info command implementation."""

import asyncio
import sys

import click

from devenv.errors import format_error
from devenv.runtime import DevEnv

from .utils import load_environment


@click.command()
@click.pass_context
def info(ctx):
    """Display system information."""
    debug = ctx.obj.get("debug", False)
    env = load_environment(debug)
    try:
        asyncio.run(run_info(env))
    except Exception as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)


async def run_info(env: DevEnv):
    platform = env.platform
    manager = await env.registry.detect_package_manager()
    distribution = await env.probe.detect_distribution()

    click.echo(f"Operating System: {platform.os_family.value}")
    click.echo(f"Platform: {platform.raw_platform_name}")
    click.echo(f"Architecture: {platform.architecture}")
    if distribution:
        click.echo(f"Distribution: {distribution}")

    if manager:
        click.echo(f"Package Manager: {manager.name}")
        click.echo(f"Install Command: {manager.install_command_prefix}")
    else:
        click.echo("Package Manager: None detected")

    click.echo(f"Shell Profile: {env.configurator.profile_path}")
