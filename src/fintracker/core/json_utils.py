#!/usr/bin/env python3
"""
JSON Utilities Module

Provides centralized JSON reading and writing functions with consistent formatting.
All JSON documents in the tracker go through these helpers so that files are
pretty-printed the same way and never left half-written.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def write_json(filepath: str | Path, data: Any, ensure_ascii: bool = False, sort_keys: bool = False) -> None:
    """
    Write data to a JSON file with standard pretty-printing.

    The document is written to a temporary file in the same directory and
    then moved over the target, so readers see either the old or the new
    document and never a truncated one.

    Args:
        filepath: Path to the JSON file
        data: Data to write to the file
        ensure_ascii: If True, escape non-ASCII characters (default: False)
        sort_keys: If True, sort dictionary keys (default: False)
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=ensure_ascii, sort_keys=sort_keys)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, filepath)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def read_json(filepath: str | Path) -> Any:
    """
    Read data from a JSON file.

    Args:
        filepath: Path to the JSON file

    Returns:
        The parsed JSON data
    """
    with open(filepath, encoding="utf-8") as f:
        return json.load(f)
