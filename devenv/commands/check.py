"""Check command implementation."""

import asyncio
import sys

import click

from devenv.errors import format_error
from devenv.installer import recommendations
from devenv.runtime import DevEnv
from devenv.tui import display_system_status

from .utils import load_environment


@click.command()
@click.option("--tool", "-t", help="Check a specific tool")
@click.pass_context
def check(ctx, tool: str | None):
    """Check installed development tools."""
    debug = ctx.obj.get("debug", False)
    env = load_environment(debug)
    try:
        asyncio.run(run_check(env, tool))
    except Exception as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)


async def run_check(env: DevEnv, tool: str | None):
    if tool:
        status = await env.validator.check_tool(tool)
        if status.is_installed:
            click.echo(f"✅ {status.display_name} is installed")
            if status.detected_version:
                click.echo(f"   Version: {status.detected_version}")
        else:
            click.echo(f"❌ {status.display_name} is not installed")
        return

    status = await env.validator.system_status()
    click.echo("Development Environment Status\n")
    display_system_status(status, recommendations(status))
