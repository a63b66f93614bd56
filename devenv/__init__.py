"""devenv: detect, install and configure developer tools."""

import logging
import sys

__version__ = "0.1.0"

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Send log records to stderr; stdout belongs to command output."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


__all__ = ["__version__", "setup_logging"]
