"""User settings loading and JSON-ish preprocessing."""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from devenv.execution import (
    DEFAULT_TIMEOUT,
    INSTALL_TIMEOUT,
    POST_INSTALL_TIMEOUT,
    PROBE_TIMEOUT,
    VERSION_MANAGER_TIMEOUT,
)

_logging = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a settings or catalog file cannot be loaded or parsed.

    Syntax errors carry the line, column and a caret under the offending
    position.
    """
    pass


# Version specifiers are spliced into shell commands (nvm install <version>).
VERSION_PATTERN = re.compile(r"[A-Za-z0-9._/*-]+")


def is_version_safe(version: str) -> bool:
    """Check that a version specifier holds no shell metacharacters."""
    return VERSION_PATTERN.fullmatch(version) is not None


def _skip_trailing_comma(text: str, start: int) -> bool:
    """True when only whitespace and // comments separate start from ] or }."""
    j = start
    n = len(text)
    while j < n:
        if text[j] in " \t\r\n":
            j += 1
        elif text.startswith("//", j):
            while j < n and text[j] != "\n":
                j += 1
        else:
            return text[j] in "]}"
    return False


def preprocess_jsonish(text: str) -> str:
    """Turn JSON-ish text (// comments, trailing commas) into strict JSON.

    Removed characters become spaces so line and column numbers in parse
    errors still point at the original text.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        char = text[i]

        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
        elif text.startswith("//", i):
            while i < n and text[i] != "\n":
                out.append(" ")
                i += 1
            continue
        elif char == "," and _skip_trailing_comma(text, i + 1):
            out.append(" ")
        else:
            out.append(char)
        i += 1

    return "".join(out)


def _format_syntax_error(original_text: str, error: json.JSONDecodeError) -> str:
    lines = original_text.split("\n")
    parts = [f"Config syntax error at line {error.lineno}, col {error.colno}: {error.msg}"]
    if 1 <= error.lineno <= len(lines):
        parts.append(lines[error.lineno - 1])
        parts.append(" " * (error.colno - 1) + "^")
    return "\n".join(parts)


def load_config(path_or_text: Path | str) -> dict:
    """Load and parse a JSON-ish document from a Path or raw text.

    Raises:
        ConfigError: If the file cannot be read or contains syntax errors.
        TypeError: If path_or_text is neither Path nor str.
    """
    if isinstance(path_or_text, Path):
        try:
            original_text = path_or_text.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path_or_text}")
        except PermissionError:
            raise ConfigError(f"Permission denied reading config file: {path_or_text}")
        except UnicodeDecodeError:
            raise ConfigError(f"Config file is not valid UTF-8: {path_or_text}")
        except OSError as e:
            raise ConfigError(f"Error reading config file {path_or_text}: {e}")
    elif isinstance(path_or_text, str):
        original_text = path_or_text
    else:
        raise TypeError(
            f"path_or_text must be Path or str, got {type(path_or_text).__name__}"
        )

    try:
        result = json.loads(preprocess_jsonish(original_text))
    except json.JSONDecodeError as e:
        raise ConfigError(_format_syntax_error(original_text, e)) from e

    if not isinstance(result, dict):
        raise ConfigError(f"Config must be a JSON object, got {type(result).__name__}")

    return result


@dataclass
class Settings:
    """Tunable behaviour read from ~/.config/devenv/config.json."""
    probe_timeout: int = PROBE_TIMEOUT
    command_timeout: int = DEFAULT_TIMEOUT
    install_timeout: int = INSTALL_TIMEOUT
    post_install_timeout: int = POST_INSTALL_TIMEOUT
    version_manager_timeout: int = VERSION_MANAGER_TIMEOUT
    default_node_version: str = "lts"
    shell_profile: Path | None = None
    tools: dict[str, dict[str, Any]] = field(default_factory=dict)


_TIMEOUT_FIELDS = (
    "probe_timeout",
    "command_timeout",
    "install_timeout",
    "post_install_timeout",
    "version_manager_timeout",
)


def validate_settings(data: dict) -> Settings:
    """Convert a raw settings dict into Settings.

    Raises:
        ConfigError: On unknown keys or wrongly typed values.
    """
    known = set(_TIMEOUT_FIELDS) | {"default_node_version", "shell_profile", "tools"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

    settings = Settings()
    for name in _TIMEOUT_FIELDS:
        if name in data:
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer")
            setattr(settings, name, value)

    if "default_node_version" in data:
        value = data["default_node_version"]
        if not isinstance(value, str) or not value.strip():
            raise ConfigError("default_node_version must be a non-empty string")
        if not is_version_safe(value.strip()):
            raise ConfigError(f"default_node_version is not a valid version: {value!r}")
        settings.default_node_version = value.strip()

    if data.get("shell_profile") is not None:
        if not isinstance(data["shell_profile"], str):
            raise ConfigError("shell_profile must be a string or null")
        settings.shell_profile = Path(data["shell_profile"]).expanduser()

    if "tools" in data:
        if not isinstance(data["tools"], dict):
            raise ConfigError("tools must be an object")
        settings.tools = data["tools"]

    return settings


def load_settings(path: Path | None = None) -> Settings:
    """Load settings, returning defaults when no settings file exists."""
    if path is None:
        from devenv.paths import get_config_path

        path = get_config_path()

    if not path.exists():
        _logging.debug(f"No settings file at {path}, using defaults")
        return Settings()

    return validate_settings(load_config(path))


__all__ = [
    "ConfigError",
    "Settings",
    "VERSION_PATTERN",
    "is_version_safe",
    "load_config",
    "load_settings",
    "preprocess_jsonish",
    "validate_settings",
]
