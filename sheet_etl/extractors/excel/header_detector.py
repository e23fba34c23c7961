"""
HeaderDetector: decide where a sheet's header block ends and data begins.

Used only when a sheet has no layout profile overriding the boundary.
Works on structural cues (share of numeric / date-like cells) rather than
field names, so it generalises across sheet layouts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Sequence

from sheet_etl.extractors.excel.config import (
    DATE_PREFIX_RE,
    ISO_DATETIME_RE,
    PURE_NUMBER_RE,
    SHORT_WEEK_CODE_RE,
    ExtractorConfig,
    DEFAULT_CONFIG,
)
from sheet_etl.extractors.excel.data_cleaner import DataCleaner


@dataclass(frozen=True)
class HeaderBoundary:
    header_row_count: int
    data_start_row: int  # 1-based


class HeaderDetector:
    """
    Stateless detector for the header/data boundary.

    An :class:`ExtractorConfig` can be passed in to override the scan
    depth and the data-like ratio threshold.
    """

    def __init__(self, cfg: ExtractorConfig = DEFAULT_CONFIG):
        self._cfg = cfg

    @staticmethod
    def is_data_like(value: Any) -> bool:
        """Numbers, booleans, dates and number/date-looking strings."""
        if isinstance(value, (bool, int, float, datetime, date)):
            return True
        text = str(value).strip()
        return bool(
            PURE_NUMBER_RE.match(text)
            or DATE_PREFIX_RE.match(text)
            or SHORT_WEEK_CODE_RE.match(text)
            or ISO_DATETIME_RE.match(text)
        )

    def detect_boundary(self, rows: Sequence[Sequence[Any]], max_header_rows: int = 0) -> HeaderBoundary:
        """
        Find the first data row among the top rows of a sheet.

        Row ``i`` (0-based, never the first row) starts the data when it
        has at least two non-empty cells and either more than
        ``data_like_ratio`` of them look like data, or its first non-empty
        value is the number ``1`` (a running sequence column).  Falls back
        to a single header row.
        """
        max_header = max_header_rows or self._cfg.max_header_rows
        if len(rows) < 2:
            return HeaderBoundary(header_row_count=1, data_start_row=2)

        for i in range(1, min(len(rows), max_header + 3)):
            row = rows[i]
            if not row:
                continue
            non_empty: List[Any] = [v for v in row if not DataCleaner.is_empty(v)]
            if len(non_empty) < 2:
                continue

            data_like = sum(1 for v in non_empty if self.is_data_like(v))
            if data_like / len(non_empty) > self._cfg.data_like_ratio:
                return HeaderBoundary(header_row_count=i, data_start_row=i + 1)

            first = non_empty[0]
            if isinstance(first, (int, float)) and not isinstance(first, bool) and first == 1:
                return HeaderBoundary(header_row_count=i, data_start_row=i + 1)

        return HeaderBoundary(header_row_count=1, data_start_row=2)
