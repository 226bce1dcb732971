"""
cqldoc Result Renderer
======================
Formats an extracted Schema as JSON and reports errors.

Output shape:
    {"Tables": [{"Comment", "Keyspace", "Name",
                 "Columns": [{"Comment", "Name", "CqlType"}]}]}
"""

import json
import sys
from typing import Optional, TextIO

from cqlschema.model import Schema


class Renderer:

    def __init__(self, output: TextIO = None, errors: TextIO = None):
        self.output = output or sys.stdout
        self.errors = errors or sys.stderr
        self.indent: Optional[int] = 4  # None = single line
        self.sort_keys: bool = False

    # ─── Public API ─────────────────────────────────────────────────

    def render_schema(self, schema: Schema):
        text = json.dumps(
            schema.to_dict(),
            indent=self.indent,
            sort_keys=self.sort_keys,
            ensure_ascii=False,
        )
        self._print(text)

    def render_error(self, error: Exception):
        """Render an error with classification prefix to the error stream."""
        prefix = self._classify_error(type(error).__name__)
        print(f"error: {prefix}: {error}", file=self.errors)

    # ─── Helpers ────────────────────────────────────────────────────

    def _classify_error(self, error_type: str) -> str:
        """Map error class name to user-friendly prefix."""
        mapping = {
            "ParseError": "SyntaxError",
            "CqlSyntaxError": "SyntaxError",
            "TableNotFound": "SchemaError",
            "ColumnNotFound": "SchemaError",
            "DuplicateColumn": "SchemaError",
            "SchemaError": "SchemaError",
            "FileNotFoundError": "IOError",
            "PermissionError": "IOError",
            "UnicodeDecodeError": "IOError",
            "OSError": "IOError",
        }
        return mapping.get(error_type, f"Error[{error_type}]")

    def _print(self, text: str):
        print(text, file=self.output)
