#!/usr/bin/env python3
"""
File and JSON Helpers for the CLI

Every file the CLI reads goes through read_text, and everything it prints as
JSON goes through format_json, so encodings and indentation stay consistent.
The engine itself never touches files.
"""

import json
from pathlib import Path
from typing import Any


def read_text(filepath: str | Path) -> str:
    """
    Read a backup or CSV export.

    Bank exports opened and re-saved in a spreadsheet often gain a UTF-8
    byte-order mark; it is dropped here.

    Args:
        filepath: Path to the file

    Returns:
        File contents
    """
    with open(filepath, encoding="utf-8-sig") as f:
        return f.read()


def format_json(data: Any) -> str:
    """Pretty-print data as JSON, keeping non-ASCII text readable and stringifying anything else."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)
