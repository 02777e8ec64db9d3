"""
Split key derivation and stable grouping of data rows.
"""

from typing import Dict, Iterator, List, Tuple

from .errors import InvalidColumnError
from .ingest import TypedValue
from .io_utils import sanitize_key


def validate_split_column(header: List[str], column_index: int) -> None:
    """
    Check that ``column_index`` addresses a header column.

    Raises:
        InvalidColumnError: If the index is outside the header
    """
    if not 0 <= column_index < len(header):
        raise InvalidColumnError(
            f"Split column index {column_index} is out of range: "
            f"header has {len(header)} columns"
        )


def split_key_for_row(row: List[str], column_index: int) -> str:
    """Sanitized split value of a raw row; a short row counts as empty."""
    value = row[column_index] if column_index < len(row) else ""
    return sanitize_key(value)


class GroupCollector:
    """
    Accumulates typed rows by split key.

    Rows keep their source order within a group. Every added row lands in
    exactly one group.
    """

    def __init__(self, column_index: int):
        self.column_index = column_index
        self._groups: Dict[str, List[List[TypedValue]]] = {}
        self.row_count = 0

    def add(self, raw_row: List[str], typed_row: List[TypedValue]) -> str:
        key = split_key_for_row(raw_row, self.column_index)
        self._groups.setdefault(key, []).append(typed_row)
        self.row_count += 1
        return key

    def keys(self) -> List[str]:
        return list(self._groups)

    def rows(self, key: str) -> List[List[TypedValue]]:
        return self._groups[key]

    def items(self) -> Iterator[Tuple[str, List[List[TypedValue]]]]:
        return iter(self._groups.items())

    def __len__(self) -> int:
        return len(self._groups)
