"""Filesystem location helpers for devenv."""

import os
from pathlib import Path


def get_home_directory() -> Path:
    """Return the user's home directory: HOME, then USERPROFILE, then '~'."""
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    if home:
        return Path(home)
    return Path("~").expanduser()


def get_config_dir() -> Path:
    """Return XDG-compliant config directory: ~/.config/devenv"""
    return get_home_directory() / ".config" / "devenv"


def get_packaged_catalog_path() -> Path:
    """Return path to the bundled tool catalog (read-only)"""
    return Path(__file__).parent / "data" / "tools.json"


def get_config_path() -> Path:
    """Return path to user settings file.

    Priority:
    1. DEVENV_CONFIG environment variable (if set)
    2. ~/.config/devenv/config.json (default XDG location)
    """
    if "DEVENV_CONFIG" in os.environ:
        return Path(os.environ["DEVENV_CONFIG"])
    return get_config_dir() / "config.json"


def get_nvm_dir() -> Path:
    """Return the nvm installation directory (NVM_DIR or ~/.nvm)."""
    if os.environ.get("NVM_DIR"):
        return Path(os.environ["NVM_DIR"])
    return get_home_directory() / ".nvm"


def expand_path_template(template: str, version: str | None = None) -> str:
    """Fill {nvm_dir}, {home} and {version} placeholders in catalog text."""
    return template.format(
        nvm_dir=get_nvm_dir(),
        home=get_home_directory(),
        version=version or "",
    )
