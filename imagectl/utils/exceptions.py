"""Error formatting helpers for the imagectl CLI."""

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import (
    ImageCtlError,
    ConfigError,
    ValidationError,
    PresetNotFoundError,
    RecordFileError,
)


def format_pydantic_error(error: PydanticValidationError) -> str:
    """Flatten a pydantic validation error into one line per field."""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "value"
        lines.append(f"{location}: {item.get('msg')}")
    return "\n".join(lines)


def format_error_for_user(error: Exception, debug: bool = False) -> str:
    """Format an error message for user display.

    Args:
        error: The exception to format
        debug: Whether to include debug information

    Returns:
        Formatted error message
    """
    if isinstance(error, PresetNotFoundError):
        message = f"Preset error: {error.message}"
        if error.available:
            message += f"\nAvailable presets: {', '.join(error.available)}"
        return message

    if isinstance(error, RecordFileError):
        message = f"Records error: {error.message}"
        if error.file_path:
            message += f"\nFile: {error.file_path}"
        return message

    if isinstance(error, ConfigError):
        return f"Configuration error: {error.message}"

    if isinstance(error, ValidationError):
        message = f"Validation error: {error.message}"
        if error.details and debug:
            message += f"\nDetails: {error.details}"
        return message

    if isinstance(error, PydanticValidationError):
        return f"Validation error:\n{format_pydantic_error(error)}"

    if isinstance(error, ImageCtlError):
        message = f"Error: {error.message}"
        if error.details and debug:
            message += f"\nDetails: {error.details}"
        return message

    if debug:
        return f"Error: {str(error)}\nType: {type(error).__name__}"
    return f"Error: {str(error)}"
