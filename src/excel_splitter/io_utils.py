"""
I/O utilities for workbook loading, key sanitizing and output paths.
"""

import re
from pathlib import Path
from typing import BinaryIO, Union

import pandas as pd
import openpyxl
from openpyxl.workbook import Workbook

from .errors import LoadError

BLANK_KEY = "Blank"
MAX_SHEET_TITLE_LENGTH = 31
EXCEL_SUFFIXES = ['.xlsx', '.xlsm']

_NON_WORD_RUN = re.compile(r'[^A-Za-z0-9_]+')

WorkbookSource = Union[str, Path, BinaryIO]


def load_workbook_safe(source: WorkbookSource) -> Workbook:
    """
    Safely load an Excel workbook from a path or a readable byte stream.

    Cached formula results are loaded instead of the formulas themselves,
    since split rows no longer sit next to the cells a formula refers to.

    Args:
        source: Path to the Excel file, or a binary file object

    Returns:
        Loaded openpyxl workbook

    Raises:
        LoadError: If the file is missing, has the wrong extension or
            cannot be parsed
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise LoadError(f"File not found: {path}")

        if path.suffix.lower() not in EXCEL_SUFFIXES:
            raise LoadError(f"File must be an Excel file (.xlsx or .xlsm): {path}")
        source = path

    try:
        return openpyxl.load_workbook(source, data_only=True)
    except Exception as e:
        raise LoadError(f"Failed to read workbook: {e}") from e


def sanitize_key(value: str) -> str:
    """
    Sanitize a cell value for use as a group key, directory or file name.

    Every run of characters other than ASCII letters, digits and underscore
    becomes a single space. An empty result maps to ``"Blank"``.

    Args:
        value: Raw cell text

    Returns:
        Sanitized key
    """
    sanitized = _NON_WORD_RUN.sub(' ', value or '').strip()
    return sanitized if sanitized else BLANK_KEY


def truncate_sheet_title(title: str) -> str:
    """Cut a sheet title down to the 31 characters Excel allows."""
    return title[:MAX_SHEET_TITLE_LENGTH]


def ensure_out_dir(path: Path) -> Path:
    """
    Ensure output directory exists.

    Args:
        path: Directory path to create

    Returns:
        The created directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def output_file_path(out_dir: Path, sheet_name: str, split_column: str, value: str) -> Path:
    """Build ``<out_dir>/<sheet>-<split column>-<value>.xlsx``."""
    return out_dir / f"{sheet_name}-{split_column}-{value}.xlsx"


def write_manifest_csv(manifest_data: list[dict], output_path: Path) -> None:
    """
    Write manifest data to CSV file.

    Args:
        manifest_data: List of dictionaries with manifest information
        output_path: Path where to write the CSV file
    """
    if not manifest_data:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(manifest_data)
    df.to_csv(output_path, index=False, encoding='utf-8')
