"""Command modules for imagectl.

This module exports all command groups (Typer apps) that can be registered
with the main application.
"""

from .url import app as url_app
from .config import app as config_app

__all__ = [
    "url_app",
    "config_app",
]
