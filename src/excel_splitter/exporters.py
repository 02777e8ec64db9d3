"""
Export utilities that write one formatted workbook per split group.
"""

from pathlib import Path
from typing import Any, Dict, List
import logging

import openpyxl
from openpyxl.styles import Alignment, Font
from openpyxl.styles.cell_style import StyleArray
from openpyxl.utils import get_column_letter
from openpyxl.utils.indexed_list import IndexedList
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .errors import OutputWriteError
from .ingest import ColumnSample, TypedValue
from .io_utils import ensure_out_dir, output_file_path, truncate_sheet_title

logger = logging.getLogger(__name__)

# Workbook tables addressed by the indexes inside a cell's StyleArray
_STYLE_TABLES = (
    '_fonts',
    '_fills',
    '_borders',
    '_alignments',
    '_protections',
    '_number_formats',
)

HEADER_FONT = Font(bold=True)
HEADER_ALIGNMENT = Alignment(horizontal='center')


def copy_style_table(source: Workbook, target: Workbook) -> None:
    """
    Replace the style table of ``target`` with a copy of the one in ``source``.

    Style ids from ``source`` stay valid in ``target``. Named styles are not
    copied, so cell formats pointing at one fall back to "Normal".

    Args:
        source: Workbook the styles are read from
        target: Freshly created workbook
    """
    for name in _STYLE_TABLES:
        setattr(target, name, IndexedList(list(getattr(source, name))))

    named_style_count = len(target._named_styles)
    cell_styles = []
    for style in source._cell_styles:
        style = StyleArray(style)
        if style.xfId >= named_style_count:
            style.xfId = 0
        cell_styles.append(style)
    # Built from a plain list so duplicate formats keep their own index
    target._cell_styles = IndexedList(cell_styles)


def append_row(ws: Worksheet, row_idx: int, values: List[TypedValue]) -> None:
    """
    Append ``values`` as row ``row_idx``, keeping them as written.

    openpyxl binds text starting with "=" as a formula, so such cells are
    set back to plain text.
    """
    ws.append(values)
    for col_idx, value in enumerate(values, start=1):
        if isinstance(value, str) and value.startswith("="):
            ws.cell(row=row_idx, column=col_idx).data_type = 's'


def apply_column_formats(ws: Worksheet, samples: List[ColumnSample], last_row: int) -> None:
    """
    Apply sampled style ids and widths to whole columns.

    The style goes on the column definition and on every cell from row 1
    to ``last_row``, so written values pick it up too.
    """
    cell_styles = ws.parent._cell_styles
    for col_idx, sample in enumerate(samples, start=1):
        style = cell_styles[sample.style_id]
        dimension = ws.column_dimensions[sample.letter]
        dimension._style = StyleArray(style)
        dimension.width = sample.width

        for row_idx in range(1, last_row + 1):
            ws.cell(row=row_idx, column=col_idx)._style = StyleArray(style)


def apply_header_style(ws: Worksheet, column_count: int) -> None:
    """Make row 1 bold and centered, replacing any column style on it."""
    for col_idx in range(1, column_count + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell._style = StyleArray()
        cell.font = HEADER_FONT
        cell.alignment = HEADER_ALIGNMENT


def export_group(
    source_wb: Workbook,
    header: List[str],
    rows: List[List[TypedValue]],
    samples: List[ColumnSample],
    sheet_name: str,
    split_column: str,
    value: str,
    out_dir: Path
) -> Dict[str, Any]:
    """
    Build and save the workbook for one group.

    Args:
        source_wb: Workbook the group was read from, for its style table
        header: Header texts of the source sheet
        rows: Typed data rows of the group, in source order
        samples: Column samples taken from the source sheet
        sheet_name: Name of the source sheet
        split_column: Sanitized split column header
        value: Sanitized group key
        out_dir: Directory the file is saved in

    Returns:
        Manifest entry for the created file

    Raises:
        OutputWriteError: If any step of building or saving fails
    """
    wb = openpyxl.Workbook()
    try:
        ws = wb.active
        sheet_title = truncate_sheet_title(f"{split_column}-{value}")
        last_row = len(rows) + 1

        try:
            ws.title = sheet_title
            append_row(ws, 1, [text if text != "" else None for text in header])
        except Exception as e:
            raise OutputWriteError(f"Failed to set row 1 for value \"{value}\": {e}", value) from e

        for row_idx, row in enumerate(rows, start=2):
            try:
                append_row(ws, row_idx, row)
            except Exception as e:
                raise OutputWriteError(f"Failed to set row {row_idx} for value \"{value}\": {e}", value) from e

        try:
            copy_style_table(source_wb, wb)
            apply_column_formats(ws, samples, last_row)
        except Exception as e:
            raise OutputWriteError(f"Failed to apply column formats for value \"{value}\": {e}", value) from e

        try:
            apply_header_style(ws, len(header))
        except Exception as e:
            raise OutputWriteError(f"Failed to set style of row 1 for value \"{value}\": {e}", value) from e

        try:
            ws.auto_filter.ref = f"A1:{get_column_letter(len(header))}{last_row}"
            ws.freeze_panes = "A2"
        except Exception as e:
            raise OutputWriteError(f"Failed to set filter and panes for value \"{value}\": {e}", value) from e

        try:
            ensure_out_dir(out_dir)
        except OSError as e:
            raise OutputWriteError(f"Failed to create output directory {out_dir}: {e}", value) from e

        output_path = output_file_path(out_dir, sheet_name, split_column, value)
        try:
            wb.save(output_path)
        except Exception as e:
            if output_path.is_file():
                output_path.unlink()
            raise OutputWriteError(f"Failed to save file for value \"{value}\": {e}", value) from e
    finally:
        wb.close()

    logger.info(f"Created {output_path} with {len(rows)} rows")

    return {
        'value': value,
        'output_path': str(output_path),
        'row_count': len(rows),
        'sheet_title': sheet_title,
    }
