"""
Pytest configuration and shared fixtures.
"""
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

import pytest

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


class FakeWorksheet:
    """
    In-memory raw worksheet accessor.

    Cells are addressed 1-based; every read is recorded in ``reads`` so
    tests can assert how far a scan went.
    """

    def __init__(
        self,
        cells: Dict[Tuple[int, int], Any],
        row_count: Optional[int] = None,
        column_count: Optional[int] = None,
        merges: Optional[List[str]] = None,
    ):
        self.cells = dict(cells)
        self._row_count = row_count or max((r for r, _ in self.cells), default=0)
        self._column_count = column_count or max((c for _, c in self.cells), default=0)
        self._merges = list(merges or [])
        self.reads: List[Tuple[int, int]] = []

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def column_count(self) -> int:
        return self._column_count

    def cell_value(self, row: int, col: int) -> Any:
        self.reads.append((row, col))
        return self.cells.get((row, col))

    def merge_ranges(self) -> List[str]:
        return list(self._merges)


@pytest.fixture
def fake_worksheet():
    """Factory for :class:`FakeWorksheet`."""
    return FakeWorksheet


@pytest.fixture
def sample_date_strings():
    """Date strings in the formats the workbooks actually use."""
    return {
        # ISO formats
        "iso_date": "2026-01-05",
        "iso_datetime": "2026-01-05T10:30:00",

        # Korean short formats
        "dot_ymd": "2026.02.22",
        "slash_ymd": "2026/2/22",
        "two_digit_year": "26-01-05",

        # Invalid
        "invalid": "not_a_date",
        "free_text": "1월 말",
    }
