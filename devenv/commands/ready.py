"""Ready command implementation."""

import asyncio
import sys

import click

from devenv.errors import format_error
from devenv.runtime import DevEnv

from .utils import load_environment


@click.command()
@click.argument("tools", nargs=-1, required=True)
@click.pass_context
def ready(ctx, tools: tuple[str, ...]):
    """Check that every named tool is installed."""
    debug = ctx.obj.get("debug", False)
    env = load_environment(debug)
    try:
        is_ready = asyncio.run(run_ready(env, list(tools)))
    except Exception as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)

    if not is_ready:
        sys.exit(1)


async def run_ready(env: DevEnv, tools: list[str]) -> bool:
    readiness = await env.validator.is_ready(tools)
    for name in readiness.present:
        click.echo(f"✅ {name}")
    for name in readiness.missing:
        click.echo(f"❌ {name}")

    if readiness.ready:
        click.echo("\nAll required tools are installed.")
    else:
        click.echo(f"\nMissing: {', '.join(readiness.missing)}")
    return readiness.ready
