"""
Participation-matrix extractor.

The participation sheets (``100-2.참여율(e-나라)`` and siblings) do not
fit the one-row-one-record model.  Their layout, 1-based::

    row 4   project name        ┐
    row 5   client organisation │  one value per group, usually merged
    row 6   department          │  across the group's three columns
    row 7   special note        │
    row 8   stage               ┘
    row 9   column headers:  A..D summary | 이름 · 참여율 · 기간 | 이름 · 참여율 · 기간 | ...
    row 10+ data

Columns A–D hold a per-member summary (name, nickname, total rate,
project count).  From column E on, a three-column ``(name, rate, period)``
group repeats once per project.  Every non-empty ``(row, group)`` cell
becomes one record, enriched with the group's project header rows and
the member's summary row.

The workbook is re-opened directly because merge ranges and raw
coordinates are not exposed by the generic row parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sheet_etl.extractors.base import BaseSheetExtractor
from sheet_etl.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from sheet_etl.extractors.excel.data_cleaner import DataCleaner
from sheet_etl.extractors.excel.merged_cells import MergedCellIndex
from sheet_etl.extractors.excel.normalizers import normalize_amount
from sheet_etl.extractors.excel.rates import normalize_rate
from sheet_etl.extractors.excel.reader import ExcelReader, WorksheetAccessor
from sheet_etl.ir import ExtractedRecord, ExtractionResult, ExtractionStats, SheetMapping
from sheet_etl.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MemberSummary:
    nickname: Optional[str]
    total_rate: Optional[float]
    total_project_count: Optional[float]


class MatrixSheetExtractor(BaseSheetExtractor):
    """Extracts participation entries from the repeating-group matrix layout."""

    def __init__(self, reader: Optional[ExcelReader] = None, cfg: ExtractorConfig = DEFAULT_CONFIG):
        self._cfg = cfg
        self._reader = reader or ExcelReader(cfg)

    def matches(self, sheet_name: str) -> bool:
        return bool(self._cfg.matrix_sheet_name_re.search(sheet_name or ""))

    def extract(self, file_path: str, mapping: SheetMapping) -> ExtractionResult:
        sheet = self._reader.open_worksheet(file_path, mapping.sheet_name)
        return self.extract_from_sheet(sheet, mapping)

    def extract_from_sheet(self, sheet: WorksheetAccessor, mapping: SheetMapping) -> ExtractionResult:
        cfg = self._cfg
        row_count = sheet.row_count
        cells = MergedCellIndex(sheet.merge_ranges(), sheet.cell_value)

        groups = self.find_groups(cells, sheet.column_count)
        summary = self.build_summary(cells, row_count)
        records = self.scan(cells, row_count, groups, summary, mapping.sheet_name)

        logger.info(
            "'%s' (matrix) → %s: %d groups, %d members in summary, %d records",
            mapping.sheet_name, mapping.target_collection, len(groups), len(summary), len(records),
        )
        return ExtractionResult(
            sheet_name=mapping.sheet_name,
            target_collection=mapping.target_collection,
            records=records,
            errors=[],
            stats=ExtractionStats(
                total=max(0, row_count - cfg.matrix_data_start_row + 1),
                extracted=len(records),
                errored=0,
            ),
        )

    # ------------------------------------------------------------------
    # Layout discovery
    # ------------------------------------------------------------------

    def find_groups(self, cells: MergedCellIndex, column_count: int) -> List[int]:
        """
        Start columns of the ``(name, rate, period)`` groups.

        A group starts at ``c`` when header ``(9, c)`` contains the name
        label and header ``(9, c + 1)`` is a participation/input-rate label.
        """
        cfg = self._cfg
        groups: List[int] = []
        c = cfg.matrix_group_scan_start_col
        while c <= column_count - 2:
            name_header = DataCleaner.compact(cells.value(cfg.matrix_header_row, c))
            rate_header = DataCleaner.compact(cells.value(cfg.matrix_header_row, c + 1))
            if cfg.matrix_name_label in name_header and cfg.matrix_rate_label_re.search(rate_header):
                groups.append(c)
                c += cfg.matrix_group_width - 1
            c += 1
        return groups

    def build_summary(self, cells: MergedCellIndex, row_count: int) -> Dict[str, MemberSummary]:
        """
        Member summary from columns A–D, keyed by normalised name.

        A name that appears twice keeps the later row.
        """
        summary: Dict[str, MemberSummary] = {}
        for r in range(self._cfg.matrix_data_start_row, row_count + 1):
            name = DataCleaner.normalize_text(cells.value(r, 1))
            if not name:
                continue
            if name in summary:
                logger.debug("Summary name %r repeats at row %d; later row wins", name, r)
            summary[name] = MemberSummary(
                nickname=DataCleaner.text_or_none(cells.value(r, 2)),
                total_rate=normalize_rate(cells.value(r, 3)),
                total_project_count=normalize_amount(cells.value(r, 4)),
            )
        return summary

    def group_headers(self, cells: MergedCellIndex, col: int) -> Dict[str, Optional[str]]:
        cfg = self._cfg
        return {
            "projectName": DataCleaner.text_or_none(cells.value(cfg.matrix_project_row, col)),
            "clientOrg": DataCleaner.text_or_none(cells.value(cfg.matrix_client_org_row, col)),
            "department": DataCleaner.text_or_none(cells.value(cfg.matrix_department_row, col)),
            "note": DataCleaner.text_or_none(cells.value(cfg.matrix_note_row, col)),
            "stage": DataCleaner.text_or_none(cells.value(cfg.matrix_stage_row, col)),
        }

    # ------------------------------------------------------------------
    # Main scan
    # ------------------------------------------------------------------

    def scan(
        self,
        cells: MergedCellIndex,
        row_count: int,
        groups: List[int],
        summary: Dict[str, MemberSummary],
        sheet_name: str,
    ) -> List[ExtractedRecord]:
        """
        Walk the data rows and emit one record per filled ``(row, group)``.

        Stops after ``matrix_max_empty_rows`` consecutive rows with no
        payload in any group.  Cells without a member name, and names
        starting with the footnote marker, emit nothing but still count
        the row as active.
        """
        cfg = self._cfg
        headers = {c: self.group_headers(cells, c) for c in groups}
        records: List[ExtractedRecord] = []
        empty_streak = 0

        for r in range(cfg.matrix_data_start_row, row_count + 1):
            row_has_entry = False
            for c in groups:
                name = DataCleaner.normalize_text(cells.value(r, c))
                rate_raw = cells.value(r, c + 1)
                period = DataCleaner.normalize_text(cells.value(r, c + 2))
                if not (name or DataCleaner.normalize_text(rate_raw) or period):
                    continue
                row_has_entry = True
                if not name or name.startswith(cfg.matrix_footnote_marker):
                    continue
                records.append(
                    self._build_record(name, rate_raw, period, headers[c], summary.get(name), sheet_name, r)
                )

            if row_has_entry:
                empty_streak = 0
                continue
            empty_streak += 1
            if empty_streak >= cfg.matrix_max_empty_rows:
                logger.debug("'%s': %d empty rows in a row, stopping at row %d", sheet_name, empty_streak, r)
                break

        return records

    @staticmethod
    def _build_record(
        name: str,
        rate_raw: Any,
        period: str,
        headers: Dict[str, Optional[str]],
        member: Optional[MemberSummary],
        sheet_name: str,
        row: int,
    ) -> ExtractedRecord:
        total_count = member.total_project_count if member else None
        return {
            "memberName": name,
            "nickname": member.nickname if member else None,
            "totalRate": member.total_rate if member else None,
            "totalProjectCount": int(total_count) if total_count is not None else None,
            "projectName": headers["projectName"],
            "clientOrg": headers["clientOrg"],
            "department": headers["department"],
            "note": headers["note"],
            "stage": headers["stage"],
            "rate": normalize_rate(rate_raw),
            "period": period or None,
            "_source": {"sheet": sheet_name, "row": row},
        }
