"""
Generic sheet extractor: column mappings applied row by row.

Flow per sheet:
    profile lookup → ExcelReader.parse_sheet → build_column_resolver
    → for each row: RecordAssembler → null-row filter → should_keep_record
    → ``_source`` provenance

A row whose assembly raises is recorded as ``"Row <n>: <message>"`` and
the remaining rows still run.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from sheet_etl.extractors.base import BaseSheetExtractor
from sheet_etl.extractors.excel.column_resolver import build_column_resolver
from sheet_etl.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from sheet_etl.extractors.excel.reader import ExcelReader
from sheet_etl.extractors.excel.record_assembler import RecordAssembler, is_all_null
from sheet_etl.extractors.excel.record_guard import should_keep_record
from sheet_etl.ir import (
    ExtractedRecord,
    ExtractionResult,
    ExtractionStats,
    ParsedSheet,
    SheetMapping,
    SheetProfile,
)
from sheet_etl.logger import get_logger
from sheet_etl.profile_loader import SheetProfileLookup, layout_overrides

logger = get_logger(__name__)

ProfileLookup = Callable[[str], Optional[SheetProfile]]


class GenericSheetExtractor(BaseSheetExtractor):
    """Extracts sheets whose rows map one-to-one onto records."""

    def __init__(
        self,
        reader: Optional[ExcelReader] = None,
        profile_lookup: Optional[ProfileLookup] = None,
        cfg: ExtractorConfig = DEFAULT_CONFIG,
        max_rows: Optional[int] = None,
    ):
        self._cfg = cfg
        self._reader = reader or ExcelReader(cfg)
        self._profile_lookup = profile_lookup or SheetProfileLookup()
        self._max_rows = max_rows

    def extract(self, file_path: str, mapping: SheetMapping) -> ExtractionResult:
        profile = self._profile_lookup(mapping.sheet_name)
        parsed = self._reader.parse_sheet(
            file_path,
            mapping.sheet_name,
            max_rows=self._max_rows,
            **layout_overrides(profile),
        )
        return self.extract_parsed(parsed, mapping)

    def extract_parsed(self, parsed: ParsedSheet, mapping: SheetMapping) -> ExtractionResult:
        """Apply *mapping* to an already-parsed sheet."""
        resolver = build_column_resolver(parsed.headers, (m.excel_column for m in mapping.column_mappings))
        assembler = RecordAssembler(mapping.column_mappings, resolver, self._cfg)

        records: List[ExtractedRecord] = []
        errors: List[str] = []
        errored = 0
        for i, row in enumerate(parsed.rows):
            try:
                record = assembler.assemble(row)
                if is_all_null(record):
                    continue
                if not should_keep_record(record, mapping.target_collection):
                    continue
                record["_source"] = {"sheet": mapping.sheet_name, "row": i + 1}
                records.append(record)
            except Exception as e:
                errored += 1
                errors.append(f"Row {i + 1}: {e}")

        logger.info(
            "'%s' → %s: %d records extracted (%d errors from %d rows)",
            mapping.sheet_name, mapping.target_collection, len(records), errored, len(parsed.rows),
        )
        return ExtractionResult(
            sheet_name=mapping.sheet_name,
            target_collection=mapping.target_collection,
            records=records,
            errors=errors,
            stats=ExtractionStats(total=len(parsed.rows), extracted=len(records), errored=errored),
        )
