"""Message formatting shared by the CLI, the data loader and the installer.

Conventions:
- CLI errors carry an 'Error: ' prefix
- Validation errors read '<entity> field '<field>' <issue>'
- Install failures name the tool by its display name
"""


def format_error(message: str) -> str:
    """Prefix a message for stderr.

    >>> format_error("tool 'foo' not found")
    "Error: tool 'foo' not found"
    """
    return f"Error: {message}"


def format_field_error(entity: str, field: str, issue: str) -> str:
    """
    >>> format_field_error("Tool 'go'", "verify_command", "is required")
    "Tool 'go' field 'verify_command' is required"
    """
    return f"{entity} field '{field}' {issue}"


def format_suggestion(message: str, suggestion: str) -> str:
    """
    >>> format_suggestion("unknown tool 'foo'", "run 'devenv list' to see available tools")
    "Error: unknown tool 'foo'. Hint: run 'devenv list' to see available tools"
    """
    return f"{format_error(message)}. Hint: {suggestion}"


def format_manual_install(url: str | None) -> str | None:
    """Details text pointing at a vendor's install page, if one is known."""
    if not url:
        return None
    return f"Please install manually: {url}"


def format_prerequisite_failure(prerequisite: str, display_name: str) -> str:
    """
    >>> format_prerequisite_failure("Java", "Android Studio")
    'Failed to install Java (required for Android Studio)'
    """
    return f"Failed to install {prerequisite} (required for {display_name})"


__all__ = [
    "format_error",
    "format_field_error",
    "format_manual_install",
    "format_prerequisite_failure",
    "format_suggestion",
]
