"""List command implementation."""

import click

from devenv.installer import ToolCategory

from .utils import load_environment


@click.command(name="list")
@click.option(
    "--category",
    "-c",
    type=click.Choice([c.value for c in ToolCategory]),
    help="Only list tools in this category",
)
@click.pass_context
def list_tools(ctx, category: str | None):
    """List all available tools."""
    debug = ctx.obj.get("debug", False)
    env = load_environment(debug, require_supported=False)

    tools = list(env.catalog)
    if category:
        tools = env.catalog.by_category(ToolCategory(category))

    if not tools:
        click.echo("No tools found.")
        return

    width = max(len(t.canonical_name) for t in tools)
    for tool in tools:
        click.echo(f"{tool.canonical_name.ljust(width)}  {tool.display_name}")
