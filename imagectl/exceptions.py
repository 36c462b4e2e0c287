"""Exception classes for imagectl.

This module defines the exception classes raised by the configuration,
preset lookup and output layers. URL resolution itself never raises.
"""

from typing import Optional, Dict, Any, List


class ImageCtlError(Exception):
    """Base exception class for all imagectl errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(ImageCtlError):
    """Exception raised for configuration-related errors."""
    pass


class ValidationError(ImageCtlError):
    """Exception raised for data validation errors."""
    pass


class PresetNotFoundError(ImageCtlError):
    """Exception raised when a named image preset does not exist."""

    def __init__(
        self,
        message: str,
        preset: Optional[str] = None,
        available: Optional[List[str]] = None,
        **kwargs: Any
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            preset: The preset name that was requested
            available: Preset names that do exist
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(message, **kwargs)
        self.preset = preset
        self.available = available or []


class RecordFileError(ImageCtlError):
    """Exception raised when a records file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.file_path = file_path
