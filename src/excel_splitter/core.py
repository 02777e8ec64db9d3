"""
Core orchestration logic for splitting a worksheet by column value.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .errors import NoDataError, SheetNotFoundError, SplitterError
from .exporters import export_group
from .grouping import GroupCollector, validate_split_column
from .ingest import ColumnSample, coerce_row, iter_raw_rows, sample_columns
from .io_utils import WorkbookSource, load_workbook_safe, sanitize_key
from .progress import StatusBroadcaster, StatusCallback

logger = logging.getLogger(__name__)


class ExcelSplitter:
    """
    Splits one sheet of a loaded workbook into one workbook per column value.

    A single split may run at a time per instance; the caller must not load,
    dispose or split again until ``split_by_column`` returns.
    """

    def __init__(self) -> None:
        self.workbook: Optional[Workbook] = None
        self.status = StatusBroadcaster()

    def register_status_callback(self, observer_id: str, callback: StatusCallback) -> None:
        """Register a callback receiving short status strings during a split."""
        self.status.register(observer_id, callback)

    def load_file(self, source: WorkbookSource) -> None:
        """
        Load the workbook to split, disposing of any previous one.

        Args:
            source: Path to an Excel file or a readable binary stream

        Raises:
            LoadError: If the workbook cannot be read
        """
        self.dispose_file_if_loaded()
        self.workbook = load_workbook_safe(source)
        logger.info(f"Loaded workbook with {len(self.workbook.sheetnames)} sheets")

    def dispose_file_if_loaded(self) -> None:
        if self.workbook is None:
            return
        self.workbook.close()
        self.workbook = None

    def get_sheets(self) -> List[str]:
        return self._require_workbook().sheetnames

    def get_columns(self, sheet: str) -> List[str]:
        """
        Return the header row of ``sheet``.

        Raises:
            NoDataError: If the sheet has no data row below the header
        """
        rows = iter_raw_rows(self._worksheet(sheet))
        header = next(rows, None)
        if header is None or next(rows, None) is None:
            raise NoDataError(f"Sheet '{sheet}' has no data")
        return header

    def split_by_column(
        self,
        sheet: str,
        column_index: int,
        output_root: Union[str, Path] = ".",
        cleanup_on_failure: bool = False
    ) -> Dict[str, Any]:
        """
        Write one workbook per distinct value of a column.

        Files go to ``<output_root>/<column header>/`` and are named
        ``<sheet>-<column header>-<value>.xlsx``, header and value sanitized.

        Args:
            sheet: Name of the sheet to split
            column_index: 0-based index of the split column
            output_root: Directory the output directory is created in
            cleanup_on_failure: Delete the files this call already wrote when
                a later group fails

        Returns:
            Summary dictionary with results

        Raises:
            InvalidColumnError: If the column index is outside the header,
                raised before any data row is read
            NoDataError: If the sheet has no data row
            SplitterError: For any read or write failure
        """
        ws = self._worksheet(sheet)
        logger.info(f"Splitting sheet '{sheet}' by column index {column_index}")

        self.status.dispatch("Reading rows")
        rows = iter_raw_rows(ws)
        header = next(rows, None)
        if header is None:
            raise NoDataError(f"Sheet '{sheet}' has no data")
        validate_split_column(header, column_index)
        split_column = sanitize_key(header[column_index])

        samples: Optional[List[ColumnSample]] = None
        groups = GroupCollector(column_index)
        for row_number, row in enumerate(rows, start=1):
            if samples is None:
                samples = sample_columns(ws, max(len(header), len(row)), header)
            self.status.dispatch(f"Processing row {row_number}")
            groups.add(row, coerce_row(row, samples))

        if samples is None:
            raise NoDataError(f"Sheet '{sheet}' has no data")

        logger.info(f"Found {len(groups)} groups in {groups.row_count} rows")

        out_dir = Path(output_root) / split_column
        manifest_entries = []
        try:
            for value, group_rows in groups.items():
                self.status.dispatch(f"Writing sheet for value \"{value}\"")
                manifest_entries.append(export_group(
                    self.workbook, header, group_rows, samples, sheet, split_column, value, out_dir
                ))
        except Exception:
            if cleanup_on_failure:
                _remove_outputs(manifest_entries)
            raise

        return {
            'sheet': sheet,
            'split_column': split_column,
            'output_dir': str(out_dir),
            'total_rows': groups.row_count,
            'groups_found': len(groups),
            'files_created': len(manifest_entries),
            'manifest_entries': manifest_entries
        }

    def _require_workbook(self) -> Workbook:
        if self.workbook is None:
            raise SplitterError("No workbook loaded")
        return self.workbook

    def _worksheet(self, sheet: str) -> Worksheet:
        wb = self._require_workbook()
        if sheet not in wb.sheetnames:
            raise SheetNotFoundError(f"Sheet '{sheet}' not found. Available sheets: {wb.sheetnames}")
        ws = wb[sheet]
        if not isinstance(ws, Worksheet):
            raise SheetNotFoundError(f"Sheet '{sheet}' is not a worksheet")
        return ws


def _remove_outputs(manifest_entries: List[Dict[str, Any]]) -> None:
    """Delete files listed in ``manifest_entries``, leaving directories."""
    for entry in manifest_entries:
        path = Path(entry['output_path'])
        logger.warning(f"Removing {path} after failed split")
        path.unlink(missing_ok=True)
