"""Shared helpers for commands."""

import sys

import click

from devenv import setup_logging
from devenv.config import ConfigError
from devenv.errors import format_error
from devenv.platform import is_supported
from devenv.runtime import DevEnv, create_environment

UNSUPPORTED_PLATFORM_MESSAGE = "This tool only supports macOS and Linux"


def load_environment(debug: bool, require_supported: bool = True) -> DevEnv:
    """Configure logging and wire the services, exiting on bad config.

    Exits with status 1 on an unsupported platform unless
    require_supported is False.
    """
    setup_logging(debug)
    try:
        env = create_environment(debug=debug)
    except ConfigError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)

    if require_supported and not is_supported(env.platform):
        click.echo(format_error(UNSUPPORTED_PLATFORM_MESSAGE), err=True)
        sys.exit(1)
    return env
