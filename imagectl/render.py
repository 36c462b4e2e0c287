"""Output rendering and formatting utilities.

This module provides output formatters for displaying resolved URLs and
profiles as tables, JSON, or YAML.
"""

import sys
import json
import os
from typing import Any, Dict, List, Optional, Union

import yaml
from rich.console import Console
from rich.table import Table
from rich import box

from .exceptions import ValidationError

ENV_OUTPUT_FORMAT = "IMAGECTL_OUTPUT_FORMAT"
FORMATS = ("table", "json", "yaml")


class OutputFormatter:
    """Main output formatter that handles multiple output formats."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize output formatter.

        Args:
            console: Rich console instance. If None, creates a new one.
        """
        self.console = console or Console()

    def determine_format(self, format_override: Optional[str] = None) -> str:
        """Determine the output format to use.

        Args:
            format_override: Explicit format override

        Returns:
            Format name (table, json, yaml)
        """
        if format_override:
            return format_override.lower()

        env_format = os.environ.get(ENV_OUTPUT_FORMAT)
        if env_format:
            return env_format.lower()

        # Piped output defaults to JSON
        if sys.stdout.isatty():
            return "table"
        return "json"

    def render(
        self,
        data: Any,
        format: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Render data in the specified format.

        Args:
            data: Data to render
            format: Output format (table, json, yaml)
            **kwargs: Additional formatting options

        Raises:
            ValidationError: If the format is unknown
        """
        format_name = self.determine_format(format)

        if format_name == "table":
            self.render_table(data, **kwargs)
        elif format_name == "json":
            self.render_json(data, **kwargs)
        elif format_name == "yaml":
            self.render_yaml(data, **kwargs)
        else:
            raise ValidationError(
                f"Unknown output format: {format_name}",
                details={"supported": list(FORMATS)},
            )

    def render_table(
        self,
        data: Union[List[Dict[str, Any]], Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
        show_header: bool = True,
        **kwargs: Any,
    ) -> None:
        """Render data as a table using Rich.

        Args:
            data: Row dictionaries, or a single dictionary
            columns: Column names to display, defaults to keys of the first row
            title: Table title
            show_header: Whether to show column headers
        """
        if not data:
            self.console.print("[dim]No data to display[/dim]")
            return

        if isinstance(data, dict):
            data = [data]

        if not columns:
            columns = []
            for row in data:
                for key in row:
                    if key not in columns:
                        columns.append(key)

        table = Table(title=title, show_header=show_header, box=box.ROUNDED)
        for column in columns:
            table.add_column(column.replace("_", " ").title(), overflow="fold")

        for row in data:
            table.add_row(*[self._format_cell(row.get(column)) for column in columns])

        self.console.print(table)

    def render_json(
        self,
        data: Any,
        pretty: bool = True,
        indent: int = 2,
        **kwargs: Any,
    ) -> None:
        """Render data as JSON.

        Args:
            data: Data to render
            pretty: Whether to format JSON nicely
            indent: Indentation level for pretty printing
        """
        try:
            output = json.dumps(
                data,
                indent=indent if pretty else None,
                ensure_ascii=False,
                default=str,
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Failed to serialize data to JSON: {e}")

        print(output)

    def render_yaml(self, data: Any, **kwargs: Any) -> None:
        """Render data as YAML."""
        try:
            output = yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        except yaml.YAMLError as e:
            raise ValidationError(f"Failed to serialize data to YAML: {e}")

        print(output, end="")

    def _format_cell(self, value: Any) -> str:
        if value is None:
            return "-"
        if isinstance(value, bool):
            return "yes" if value else "no"
        return str(value)
