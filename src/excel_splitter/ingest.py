"""
Row streaming, column sampling and cell type inference.
"""

import datetime
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Union

from openpyxl.cell.cell import Cell
from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.utils.datetime import to_excel
from openpyxl.worksheet.worksheet import Worksheet

from .errors import RowReadError, StyleReadError, WidthReadError

# Plain decimal or exponent notation, no blanks or digit separators
_FLOAT_TEXT = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')

# Width Excel shows for columns without an explicit width
DEFAULT_COLUMN_WIDTH = 9.140625

TypedValue = Union[None, float, bool, str]


class CellKind(str, Enum):
    """Storage type of a cell as recorded in the workbook."""

    UNSET = "unset"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT = "text"


@dataclass
class ColumnSample:
    """Formatting and type of one column, sampled from sheet row 2."""

    letter: str
    kind: CellKind
    style_id: int
    width: float


def raw_text(value: Any) -> str:
    """
    Render a loaded cell value as the text stored in the workbook.

    Booleans become ``"1"``/``"0"`` and dates become Excel serial numbers,
    which is how the container stores them.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time, datetime.timedelta)):
        value = to_excel(value)
    return str(value)


def cell_kind(cell: Cell) -> CellKind:
    """Classify a cell by its storage type."""
    if cell.value is None:
        return CellKind.UNSET
    if cell.data_type == 'b':
        return CellKind.BOOLEAN
    if cell.data_type in ('n', 'd'):
        return CellKind.NUMBER
    return CellKind.TEXT


def parse_float(text: str) -> Optional[float]:
    """Parse ``text`` as a finite float, or return None."""
    if not _FLOAT_TEXT.fullmatch(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def coerce_cell(text: str, kind: CellKind) -> TypedValue:
    """
    Convert raw cell text into the value written to the output workbook.

    Args:
        text: Raw cell text
        kind: Storage type sampled for the cell's column

    Returns:
        None for empty text, a float or bool where the column type allows
        it, otherwise the text unchanged
    """
    if text == "":
        return None

    if kind in (CellKind.NUMBER, CellKind.UNSET):
        number = parse_float(text)
        return text if number is None else number

    if kind == CellKind.BOOLEAN:
        if text == "1":
            return True
        if text == "0":
            return False
        return text

    return text


def coerce_row(row: List[str], samples: List[ColumnSample]) -> List[TypedValue]:
    """Coerce every cell of ``row`` using the sampled column types."""
    typed = []
    for col_idx, text in enumerate(row):
        kind = samples[col_idx].kind if col_idx < len(samples) else CellKind.UNSET
        typed.append(coerce_cell(text, kind))
    return typed


def iter_raw_rows(ws: Worksheet) -> Iterator[List[str]]:
    """
    Lazily yield every row of ``ws`` as raw texts, header included.

    Trailing empty cells are dropped, so a row can be shorter than the
    header. The iterator is single pass.
    """
    rows = ws.iter_rows(values_only=True)
    row_number = 0
    while True:
        row_number += 1
        try:
            values = next(rows)
        except StopIteration:
            return
        except Exception as e:
            raise RowReadError(f"Failed to read row {row_number}: {e}") from e

        try:
            texts = [raw_text(value) for value in values]
        except Exception as e:
            raise RowReadError(f"Failed to decode row {row_number}: {e}") from e

        while texts and texts[-1] == "":
            texts.pop()
        yield texts


def column_width(ws: Worksheet, column: int) -> float:
    """
    Return the width of a 1-based column.

    openpyxl keys grouped ``<col min max>`` definitions by their first
    letter only, so the span of every definition is checked. Columns
    without a definition get the sheet's default width.
    """
    for dim in ws.column_dimensions.values():
        first = dim.min or column_index_from_string(dim.index)
        last = dim.max or first
        if first <= column <= last and dim.width:
            return dim.width
    return ws.sheet_format.defaultColWidth or DEFAULT_COLUMN_WIDTH


def sample_columns(ws: Worksheet, column_count: int, header: List[str]) -> List[ColumnSample]:
    """
    Sample type, style id and width of each column from sheet row 2.

    Args:
        ws: Source worksheet
        column_count: Number of columns to sample
        header: Header texts, used in error messages

    Returns:
        One sample per column, in column order
    """
    samples = []
    for col_idx in range(column_count):
        letter = get_column_letter(col_idx + 1)
        name = header[col_idx] if col_idx < len(header) else letter
        cell = ws.cell(row=2, column=col_idx + 1)

        try:
            style_id = cell.style_id
        except Exception as e:
            raise StyleReadError(f"Failed to read style of cell {letter}2 (column '{name}'): {e}") from e

        try:
            width = column_width(ws, col_idx + 1)
        except Exception as e:
            raise WidthReadError(f"Failed to read width of column {letter} ('{name}'): {e}") from e

        samples.append(ColumnSample(letter=letter, kind=cell_kind(cell), style_id=style_id, width=width))

    return samples
