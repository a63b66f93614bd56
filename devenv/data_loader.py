"""Data loader for the bundled tool catalog.

The catalog is read from ``data/tools.json`` once on first access and cached
in a module-level variable for the lifetime of the program. Use clear_cache()
to force a reload (tests do this to avoid state leaking between cases).

User-defined entries from the settings file go through the same validation
via parse_tools().
"""

from pathlib import Path
from typing import Any

from devenv.config import ConfigError, load_config
from devenv.errors import format_field_error
from devenv.installer.models import (
    InstallMethod,
    InstallStrategy,
    PackageManagerId,
    ToolCategory,
    ToolDescriptor,
)
from devenv.paths import get_packaged_catalog_path


_tools_cache: dict[str, ToolDescriptor] | None = None

_KNOWN_MANAGERS = {m.value for m in PackageManagerId if m != PackageManagerId.UNKNOWN}


def _load_json_file(path: Path) -> dict:
    """Load a JSON-ish data file.

    Raises:
        ConfigError: If file cannot be read or contains invalid JSON
    """
    if not path.exists():
        raise ConfigError(f"Data file not found: {path}")

    if not path.is_file():
        raise ConfigError(f"Data path is not a file: {path}")

    try:
        return load_config(path)
    except ConfigError as e:
        raise ConfigError(f"Failed to load data file {path}: {e}") from e


def _require_str_field(data: dict, field: str, entity_name: str) -> None:
    if field not in data:
        raise ConfigError(f"{entity_name} missing required field: {field}")
    if not isinstance(data[field], str) or not data[field].strip():
        raise ConfigError(format_field_error(entity_name, field, "must be a non-empty string"))


def _optional_field(data: dict, field: str, entity_name: str, field_type: type) -> None:
    if field in data and data[field] is not None:
        if not isinstance(data[field], field_type):
            raise ConfigError(
                format_field_error(entity_name, field, f"must be a {field_type.__name__} or null")
            )


def _require_enum_field(
    data: dict, field: str, entity_name: str, allowed_values: set[str]
) -> None:
    if data[field].lower() not in allowed_values:
        sorted_allowed = ", ".join(sorted(allowed_values))
        raise ConfigError(
            f"{entity_name} has invalid {field}: {data[field]}. "
            f"Must be one of: {sorted_allowed}"
        )


def _validate_string_list(data: dict, field: str, entity_name: str) -> None:
    if field in data:
        if not isinstance(data[field], list):
            raise ConfigError(format_field_error(entity_name, field, "must be an array"))
        for i, item in enumerate(data[field]):
            if not isinstance(item, str) or not item.strip():
                raise ConfigError(f"{entity_name} {field}[{i}] must be a non-empty string")


def _validate_string_map(data: dict, field: str, entity_name: str) -> None:
    if field in data and data[field] is not None:
        if not isinstance(data[field], dict):
            raise ConfigError(format_field_error(entity_name, field, "must be an object"))
        for key, value in data[field].items():
            if not isinstance(value, str):
                raise ConfigError(f"{entity_name} {field}.{key} must be a string")


def _validate_tool_data(data: dict, tool_name: str) -> None:
    """Validate raw tool data before creating a ToolDescriptor.

    Raises:
        ConfigError: If validation fails
    """
    entity = f"Tool '{tool_name}'"

    for field in ("display_name", "category", "verify_command"):
        _require_str_field(data, field, entity)
    _require_enum_field(data, "category", entity, {c.value for c in ToolCategory})

    for field in (
        "description",
        "version_flag",
        "manual_install_url",
        "shell_profile_snippet",
        "verify_path",
        "bootstrap_command",
        "version_install_command",
        "snap_package",
    ):
        _optional_field(data, field, entity, str)

    if "strategy" in data:
        _require_str_field(data, "strategy", entity)
        _require_enum_field(data, "strategy", entity, {s.value for s in InstallStrategy})

    _validate_string_list(data, "prerequisites", entity)
    _validate_string_map(data, "environment_variables", entity)

    methods = data.get("install_methods", {})
    if not isinstance(methods, dict):
        raise ConfigError(format_field_error(entity, "install_methods", "must be an object"))

    for manager, method in methods.items():
        if manager not in _KNOWN_MANAGERS:
            sorted_allowed = ", ".join(sorted(_KNOWN_MANAGERS))
            raise ConfigError(
                f"{entity} has unknown package manager: {manager}. "
                f"Must be one of: {sorted_allowed}"
            )
        method_entity = f"{entity} method '{manager}'"
        if not isinstance(method, dict):
            raise ConfigError(f"{method_entity} must be an object")
        _require_str_field(method, "package", method_entity)
        _validate_string_list(method, "alternate_commands", method_entity)
        _validate_string_list(method, "post_install_steps", method_entity)

    strategy = data.get("strategy", InstallStrategy.CATALOG.value).lower()
    if strategy == InstallStrategy.BOOTSTRAP_SCRIPT.value and not data.get("bootstrap_command"):
        raise ConfigError(format_field_error(entity, "bootstrap_command", "is required"))
    if strategy == InstallStrategy.VERSION_MANAGED.value:
        if not data.get("version_install_command"):
            raise ConfigError(format_field_error(entity, "version_install_command", "is required"))
        if not data.get("prerequisites"):
            raise ConfigError(format_field_error(entity, "prerequisites", "is required"))


def _build_tool(name: str, data: dict) -> ToolDescriptor:
    methods: dict[PackageManagerId, InstallMethod] = {}
    for manager, method in data.get("install_methods", {}).items():
        manager_id = PackageManagerId(manager)
        methods[manager_id] = InstallMethod(
            target_package_manager=manager_id,
            package_specifier=method["package"],
            alternate_commands=tuple(method.get("alternate_commands", [])),
            post_install_steps=tuple(method.get("post_install_steps", [])),
        )

    return ToolDescriptor(
        canonical_name=name,
        display_name=data["display_name"],
        category=ToolCategory(data["category"].lower()),
        verify_command=data["verify_command"],
        description=data.get("description") or "",
        version_flag=data.get("version_flag") or "--version",
        install_methods=methods,
        manual_install_url=data.get("manual_install_url"),
        environment_variables=dict(data.get("environment_variables") or {}),
        shell_profile_snippet=data.get("shell_profile_snippet"),
        strategy=InstallStrategy(data.get("strategy", "catalog").lower()),
        prerequisites=tuple(data.get("prerequisites", [])),
        verify_path=data.get("verify_path"),
        bootstrap_command=data.get("bootstrap_command"),
        version_install_command=data.get("version_install_command"),
        snap_package=data.get("snap_package"),
    )


def parse_tools(raw_tools: Any, source: str = "catalog") -> dict[str, ToolDescriptor]:
    """Validate a name -> entry mapping and build ToolDescriptors in order.

    Raises:
        ConfigError: If the mapping or any entry is invalid
    """
    if not isinstance(raw_tools, dict):
        raise ConfigError(f"Invalid {source}: 'tools' must be an object")

    tools = {}
    for tool_name, tool_data in raw_tools.items():
        if not isinstance(tool_data, dict):
            raise ConfigError(f"Invalid {source}: '{tool_name}' must be an object")
        _validate_tool_data(tool_data, tool_name)
        tools[tool_name] = _build_tool(tool_name, tool_data)

    return tools


def get_tools() -> dict[str, ToolDescriptor]:
    """Load all tools from the bundled catalog file.

    Raises:
        ConfigError: If file cannot be loaded or data is invalid
    """
    global _tools_cache

    if _tools_cache is not None:
        return _tools_cache

    raw_data = _load_json_file(get_packaged_catalog_path())
    if "tools" not in raw_data:
        raise ConfigError("Invalid tools data file: missing top-level 'tools' key")

    _tools_cache = parse_tools(raw_data["tools"], source="tools data file")
    return _tools_cache


def clear_cache() -> None:
    global _tools_cache
    _tools_cache = None


__all__ = [
    "clear_cache",
    "get_tools",
    "parse_tools",
]
