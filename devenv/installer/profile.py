"""Idempotent shell profile configuration."""

import logging
from pathlib import Path

from .models import ToolDescriptor

_logging = logging.getLogger(__name__)


def marker_for(name: str) -> str:
    return f"# >>> devenv: {name} >>>"


def end_marker_for(name: str) -> str:
    return f"# <<< devenv: {name} <<<"


def build_block(descriptor: ToolDescriptor) -> str:
    """Render the profile block for a tool, or '' if it needs none."""
    lines = [
        f'export {key}="{value}"'
        for key, value in descriptor.environment_variables.items()
    ]
    if descriptor.shell_profile_snippet:
        lines.append(descriptor.shell_profile_snippet.rstrip("\n"))
    if not lines:
        return ""
    return wrap_block(descriptor.canonical_name, "\n".join(lines))


def wrap_block(name: str, body: str) -> str:
    return f"\n{marker_for(name)}\n{body.rstrip()}\n{end_marker_for(name)}\n"


class ShellProfileConfigurator:
    """Appends marker-delimited blocks to a shell profile file.

    The marker check makes every call safe to repeat: a block already present
    is never written twice.
    """

    def __init__(self, profile_path: Path):
        self.profile_path = profile_path

    def _read(self) -> str:
        try:
            # Profiles may hold bytes in a legacy encoding; markers are ASCII.
            return self.profile_path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return ""

    def is_configured(self, name: str) -> bool:
        return marker_for(name) in self._read()

    def apply_block(self, name: str, block: str) -> bool:
        """Append an already-wrapped block unless its marker is present.

        Returns True if a write occurred.

        Raises:
            OSError: If the profile cannot be written.
        """
        if not block:
            return False

        if self.is_configured(name):
            _logging.debug(f"{self.profile_path} already configured for {name}")
            return False

        self.profile_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.profile_path, "a", encoding="utf-8") as f:
            f.write(block)
        _logging.debug(f"Appended {name} configuration to {self.profile_path}")
        return True

    def apply_configuration(self, descriptor: ToolDescriptor) -> bool:
        return self.apply_block(descriptor.canonical_name, build_block(descriptor))


__all__ = [
    "ShellProfileConfigurator",
    "build_block",
    "end_marker_for",
    "marker_for",
    "wrap_block",
]
