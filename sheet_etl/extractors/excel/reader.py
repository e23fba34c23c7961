"""
ExcelReader: low-level workbook I/O for the extraction engine.

Encapsulates:
- Opening a workbook with openpyxl (cached formula values, rich text)
- The raw worksheet accessor used by the participation-matrix path
- Generic sheet parsing: merged-cell propagation, header/data boundary
  resolution (profile overrides or auto-detection) and multi-row header
  synthesis into ``"parent > child"`` strings
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence

from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from sheet_etl.extractors.excel.config import HEADER_SEGMENT_SEP, ExtractorConfig, DEFAULT_CONFIG
from sheet_etl.extractors.excel.data_cleaner import DataCleaner
from sheet_etl.extractors.excel.header_detector import HeaderDetector
from sheet_etl.extractors.excel.merged_cells import MergedCellIndex
from sheet_etl.ir import ParsedSheet
from sheet_etl.logger import get_logger

logger = get_logger(__name__)


class SheetNotFoundError(ValueError):
    """Raised when a workbook has no sheet with the requested name."""

    def __init__(self, sheet_name: str):
        super().__init__(f'Sheet "{sheet_name}" not found')
        self.sheet_name = sheet_name


class WorksheetAccessor(Protocol):
    """Raw, coordinate-level view of one sheet (1-based rows and columns)."""

    @property
    def row_count(self) -> int: ...

    @property
    def column_count(self) -> int: ...

    def cell_value(self, row: int, col: int) -> Any: ...

    def merge_ranges(self) -> List[str]: ...


class OpenpyxlWorksheet:
    """:class:`WorksheetAccessor` over an openpyxl worksheet."""

    def __init__(self, ws: Worksheet):
        self._ws = ws
        # Fixed up front: reading a cell can grow openpyxl's dimensions.
        self._row_count = ws.max_row
        self._column_count = ws.max_column

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def column_count(self) -> int:
        return self._column_count

    def cell_value(self, row: int, col: int) -> Any:
        cell = self._ws.cell(row=row, column=col)
        if cell.data_type == "e":
            return {"error": cell.value}
        return cell.value

    def merge_ranges(self) -> List[str]:
        return [rng.coord for rng in self._ws.merged_cells.ranges]


def synthesize_headers(header_rows: Sequence[Sequence[Any]], max_length: int = 100) -> List[str]:
    """
    Collapse a multi-row header block into one header per column.

    Distinct non-empty segments are joined top-down with ``" > "``::

        ["<입금합계>", ""]  +  ["입금액(사업비)", "매입부가세 반환"]
        → ["입금합계 > 입금액(사업비)", "입금합계 > 매입부가세 반환"]

    A single header row is only cleaned; empty multi-row columns become
    ``col_<n>``.
    """
    if not header_rows:
        return []
    if len(header_rows) == 1:
        return [DataCleaner.clean_header(v, max_length) for v in header_rows[0]]

    col_count = max(len(r) for r in header_rows)
    headers: List[str] = []
    for c in range(col_count):
        parts: List[str] = []
        for row in header_rows:
            if c >= len(row) or row[c] is None:
                continue
            segment = DataCleaner.clean_header(row[c], max_length)
            if segment and segment not in parts:
                parts.append(segment)
        headers.append(HEADER_SEGMENT_SEP.join(parts) or f"col_{c + 1}")
    return headers


class ExcelReader:
    """Open workbooks and turn sheets into :class:`ParsedSheet` objects."""

    def __init__(
        self,
        cfg: ExtractorConfig = DEFAULT_CONFIG,
        header_detector: Optional[HeaderDetector] = None,
    ):
        self._cfg = cfg
        self._hd = header_detector or HeaderDetector(cfg)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def open_worksheet(self, file_path: str, sheet_name: str) -> OpenpyxlWorksheet:
        """
        Load *file_path* and return a raw accessor for *sheet_name*.

        Raises :class:`SheetNotFoundError` when the sheet does not exist.
        """
        wb = load_workbook(file_path, data_only=True, rich_text=True)
        try:
            if sheet_name not in wb.sheetnames:
                raise SheetNotFoundError(sheet_name)
            return OpenpyxlWorksheet(wb[sheet_name])
        finally:
            try:
                wb.close()
            except Exception:
                pass

    def parse_sheet(
        self,
        file_path: str,
        sheet_name: str,
        header_row_count: Optional[int] = None,
        header_start_row: Optional[int] = None,
        data_start_row: Optional[int] = None,
        max_rows: Optional[int] = None,
    ) -> ParsedSheet:
        """Parse a whole sheet into header-keyed rows."""
        return self.parse_worksheet(
            self.open_worksheet(file_path, sheet_name),
            sheet_name,
            header_row_count=header_row_count,
            header_start_row=header_start_row,
            data_start_row=data_start_row,
            max_rows=max_rows,
        )

    def parse_worksheet(
        self,
        sheet: WorksheetAccessor,
        sheet_name: str,
        header_row_count: Optional[int] = None,
        header_start_row: Optional[int] = None,
        data_start_row: Optional[int] = None,
        max_rows: Optional[int] = None,
    ) -> ParsedSheet:
        """
        Parse an already-open sheet.

        ``header_start_row`` / ``data_start_row`` are 1-based.  When
        ``header_row_count`` is omitted it is auto-detected; when
        ``data_start_row`` is omitted data starts right after the header
        block.  Fully empty data rows are skipped.
        """
        row_count = sheet.row_count
        all_rows = self.read_rows(sheet, 1, row_count)

        header_start_idx = (header_start_row or 1) - 1
        if header_row_count is None:
            header_row_count = self._hd.detect_boundary(all_rows[header_start_idx:], self._cfg.max_header_rows).header_row_count
        if data_start_row is None:
            data_start_row = header_start_idx + header_row_count + 1

        headers = synthesize_headers(
            all_rows[header_start_idx:header_start_idx + header_row_count],
            self._cfg.header_max_length,
        )

        limit = max_rows if max_rows is not None else row_count
        data_rows = all_rows[data_start_row - 1:data_start_row - 1 + limit]

        rows: List[dict] = []
        for raw in data_rows:
            if all(DataCleaner.is_empty(v) for v in raw):
                continue
            record = {}
            for i, header in enumerate(headers):
                key = header or f"col_{i + 1}"
                record[key] = raw[i] if i < len(raw) else None
            rows.append(record)

        logger.debug(
            "Parsed '%s': %d header rows from row %d, data from row %d, %d rows",
            sheet_name, header_row_count, header_start_idx + 1, data_start_row, len(rows),
        )
        return ParsedSheet(name=sheet_name, headers=headers, rows=rows, raw_rows=data_rows)

    @staticmethod
    def read_rows(sheet: WorksheetAccessor, start_row: int, end_row: int) -> List[List[Any]]:
        """Resolved values for rows ``start_row..end_row``, merges propagated."""
        merged = MergedCellIndex(sheet.merge_ranges(), sheet.cell_value)
        col_count = sheet.column_count
        return [
            [merged.value(r, c) for c in range(1, col_count + 1)]
            for r in range(start_row, end_row + 1)
        ]
