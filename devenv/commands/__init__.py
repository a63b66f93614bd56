"""CLI command definitions for devenv."""

import click

from devenv import __version__
from devenv.commands.check import check
from devenv.commands.info import info
from devenv.commands.install import install, install_all
from devenv.commands.list import list_tools as list_command
from devenv.commands.ready import ready
from devenv.commands.serve import serve


@click.group()
@click.version_option(__version__, prog_name="devenv")
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.pass_context
def cli(ctx, debug):
    """Cross-platform developer tool installer for macOS and Linux."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


cli.add_command(check)
cli.add_command(info)
cli.add_command(list_command, name="list")
cli.add_command(install)
cli.add_command(install_all, name="install-all")
cli.add_command(ready)
cli.add_command(serve)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
