"""Utility modules for imagectl.

This package contains helper functions shared by the CLI commands.
"""

from .exceptions import format_error_for_user, format_pydantic_error

__all__ = [
    "format_error_for_user",
    "format_pydantic_error",
]
