"""
MergedCellIndex: per-sheet lookup that makes merged regions read as filled.

Workbook readers report every cell of a merge range except the top-left
one as blank.  Multi-row header blocks and label columns are almost always
merged, so reading them cell by cell would yield mostly empty strings.
The index maps each covered, non-top-left coordinate to the resolved
top-left value; lookups fall back to the real cell when not covered.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from openpyxl.utils import range_boundaries

from sheet_etl.extractors.excel.data_cleaner import DataCleaner
from sheet_etl.logger import get_logger

logger = get_logger(__name__)

CellReader = Callable[[int, int], Any]


def parse_range(ref: str) -> Optional[Tuple[int, int, int, int]]:
    """
    ``"B1:D3"`` → ``(start_row, start_col, end_row, end_col)``, 1-based.

    Returns ``None`` for references that are not a closed cell rectangle
    (whole-column ``"A:A"`` or malformed text).
    """
    try:
        min_col, min_row, max_col, max_row = range_boundaries(str(ref).strip())
    except (TypeError, ValueError):
        return None
    if None in (min_col, min_row, max_col, max_row):
        return None
    return min_row, min_col, max_row, max_col


class MergedCellIndex:
    """Built once per sheet before any row is read; discarded with the sheet."""

    def __init__(self, merge_ranges: Iterable[str], read_cell: CellReader):
        self._read_cell = read_cell
        self._values: Dict[Tuple[int, int], Any] = {}
        for ref in merge_ranges:
            bounds = parse_range(ref)
            if bounds is None:
                logger.debug("Ignoring unparseable merge range: %r", ref)
                continue
            start_row, start_col, end_row, end_col = bounds
            top_left = DataCleaner.resolve_cell_value(read_cell(start_row, start_col))
            for r in range(start_row, end_row + 1):
                for c in range(start_col, end_col + 1):
                    if r == start_row and c == start_col:
                        continue
                    self._values[(r, c)] = top_left

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, coord: object) -> bool:
        return coord in self._values

    def value(self, row: int, col: int) -> Any:
        """Resolved value at ``(row, col)``, propagating merged regions."""
        key = (row, col)
        if key in self._values:
            return self._values[key]
        return DataCleaner.resolve_cell_value(self._read_cell(row, col))
