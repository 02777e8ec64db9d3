"""
Excel Splitter - split a worksheet into one workbook per column value.

This package reads one sheet of an Excel workbook, groups its data rows by the
value of a chosen column and writes one workbook per group, keeping the
header, column styles and widths of the source sheet.
"""

__version__ = "0.1.0"

from .core import ExcelSplitter
from .errors import (
    SplitterError,
    LoadError,
    SheetNotFoundError,
    NoDataError,
    InvalidColumnError,
    RowReadError,
    StyleReadError,
    WidthReadError,
    OutputWriteError
)
from .io_utils import load_workbook_safe, sanitize_key

__all__ = [
    "ExcelSplitter",
    "SplitterError",
    "LoadError",
    "SheetNotFoundError",
    "NoDataError",
    "InvalidColumnError",
    "RowReadError",
    "StyleReadError",
    "WidthReadError",
    "OutputWriteError",
    "load_workbook_safe",
    "sanitize_key"
]
