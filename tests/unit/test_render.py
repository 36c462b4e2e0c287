"""Unit tests for render.py module.

Tests the OutputFormatter class for table, JSON and YAML rendering and
output format detection.
"""

import json
import yaml
import pytest
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from rich.console import Console

from imagectl.render import OutputFormatter
from imagectl.exceptions import ValidationError


class TestOutputFormatter:
    """Test cases for the OutputFormatter class."""

    @pytest.fixture
    def buffer(self):
        return StringIO()

    @pytest.fixture
    def formatter(self, buffer):
        """Create an OutputFormatter writing to a buffer."""
        return OutputFormatter(Console(file=buffer, width=200, color_system=None))

    @pytest.fixture
    def sample_rows(self):
        return [
            {"ref": "a.png", "kind": "bare_filename", "url": "http://localhost:5000/uploads/a.png"},
            {"ref": "", "kind": "empty", "url": None},
        ]

    def test_formatter_initialization_default(self):
        formatter = OutputFormatter()
        assert isinstance(formatter.console, Console)

    def test_determine_format_explicit_override(self, formatter):
        assert formatter.determine_format("json") == "json"
        assert formatter.determine_format("YAML") == "yaml"
        assert formatter.determine_format("Table") == "table"

    @patch.dict("os.environ", {"IMAGECTL_OUTPUT_FORMAT": "YAML"})
    def test_determine_format_environment(self, formatter):
        assert formatter.determine_format() == "yaml"

    @patch("imagectl.render.sys")
    def test_determine_format_tty(self, mock_sys, formatter):
        mock_sys.stdout.isatty.return_value = True
        assert formatter.determine_format() == "table"

        mock_sys.stdout.isatty.return_value = False
        assert formatter.determine_format() == "json"

    def test_render_json(self, formatter, sample_rows, capsys):
        formatter.render(sample_rows, format="json")
        assert json.loads(capsys.readouterr().out) == sample_rows

    def test_render_json_compact(self, formatter, capsys):
        formatter.render_json({"url": "x"}, pretty=False)
        assert capsys.readouterr().out == '{"url": "x"}\n'

    def test_render_json_non_serializable_uses_str(self, formatter, capsys):
        formatter.render_json({"path": Path("uploads/a.png")})
        assert json.loads(capsys.readouterr().out) == {"path": "uploads/a.png"}

    def test_render_yaml_keeps_key_order(self, formatter, sample_rows, capsys):
        formatter.render(sample_rows, format="yaml")
        out = capsys.readouterr().out

        assert yaml.safe_load(out) == sample_rows
        assert out.index("ref:") < out.index("kind:") < out.index("url:")

    def test_render_table(self, formatter, buffer, sample_rows):
        formatter.render(sample_rows, format="table", title="Resolved images")
        out = buffer.getvalue()

        assert "Resolved images" in out
        assert "Ref" in out and "Kind" in out and "Url" in out
        assert "http://localhost:5000/uploads/a.png" in out

    def test_render_table_single_dict_and_columns(self, formatter, buffer):
        formatter.render_table({"name": "prod", "active": True, "secret": "x"}, columns=["name", "active"])
        out = buffer.getvalue()

        assert "prod" in out
        assert "yes" in out
        assert "secret" not in out.lower()

    def test_render_table_empty(self, formatter, buffer):
        formatter.render_table([])
        assert "No data to display" in buffer.getvalue()

    def test_render_table_none_cell(self, formatter, buffer):
        formatter.render_table([{"url": None}])
        assert "-" in buffer.getvalue()

    def test_unknown_format(self, formatter):
        with pytest.raises(ValidationError, match="Unknown output format"):
            formatter.render({"a": 1}, format="xml")
