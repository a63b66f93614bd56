"""Serve command implementation."""

import click


@click.command()
@click.pass_context
def serve(ctx):
    """Run the MCP server on stdio."""
    from devenv.server import run_server

    run_server(debug=ctx.obj.get("debug", False))
