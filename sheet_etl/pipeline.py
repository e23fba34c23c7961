"""
Pipeline: orchestrates sheet extraction for one workbook.

extract_data – file_path + SheetMapping[] → ExtractionResult[]

Sheets run strictly in input order.  Each sheet is dispatched to the
matrix extractor when its name matches the participation-matrix pattern
and to the generic extractor otherwise.  A failing sheet yields a
single-error result and the next sheet still runs; so does a mapping
that fails validation.

Heavy lifting is delegated to:
  sheet_etl.extractors.generic_extractor – column-mapped rows
  sheet_etl.extractors.matrix_extractor  – repeating column groups
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from sheet_etl.config import get_settings
from sheet_etl.extractors.base import BaseSheetExtractor
from sheet_etl.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from sheet_etl.extractors.excel.reader import ExcelReader
from sheet_etl.extractors.generic_extractor import GenericSheetExtractor, ProfileLookup
from sheet_etl.extractors.matrix_extractor import MatrixSheetExtractor
from sheet_etl.ir import ExtractionResult, SheetMapping
from sheet_etl.logger import get_logger
from sheet_etl.profile_loader import SheetProfileLookup

logger = get_logger(__name__)

MappingInput = Union[SheetMapping, Mapping[str, Any]]


def _as_sheet_mapping(value: MappingInput) -> SheetMapping:
    if isinstance(value, SheetMapping):
        return value
    return SheetMapping.model_validate(value)


def _raw_field(value: Any, alias: str, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(alias, value.get(name))
    return None


def _rejected(value: Any, error: ValidationError) -> ExtractionResult:
    """Single-error result for a mapping that does not validate."""
    sheet_name = _raw_field(value, "sheetName", "sheet_name")
    target = _raw_field(value, "targetCollection", "target_collection")
    return ExtractionResult.rejected(
        str(sheet_name) if sheet_name is not None else "",
        str(target) if target is not None else "",
        f"Invalid sheet mapping: {error}",
    )


def should_process(mapping: SheetMapping) -> bool:
    """Skipped sheets and sheets without column mappings produce no result at all."""
    return not mapping.skipped and len(mapping.column_mappings) > 0


class SheetExtractionOrchestrator:
    """
    Runs every mapped sheet of a workbook through the right extractor.

    Collaborators default from ``get_settings()``: the profile YAML path
    and the per-sheet row cap.
    """

    def __init__(
        self,
        generic: Optional[GenericSheetExtractor] = None,
        matrix: Optional[MatrixSheetExtractor] = None,
        cfg: ExtractorConfig = DEFAULT_CONFIG,
        profile_lookup: Optional[ProfileLookup] = None,
        max_rows: Optional[int] = None,
    ):
        settings = get_settings()
        if profile_lookup is None:
            profile_lookup = SheetProfileLookup(settings.ETL_SHEET_PROFILES_PATH)
        if max_rows is None:
            max_rows = settings.ETL_MAX_ROWS

        reader = ExcelReader(cfg)
        self._generic = generic or GenericSheetExtractor(
            reader=reader, profile_lookup=profile_lookup, cfg=cfg, max_rows=max_rows,
        )
        self._matrix = matrix or MatrixSheetExtractor(reader=reader, cfg=cfg)

    def extractor_for(self, sheet_name: str) -> BaseSheetExtractor:
        if self._matrix.matches(sheet_name):
            return self._matrix
        return self._generic

    def extract_data(self, file_path: str, mappings: Iterable[MappingInput]) -> List[ExtractionResult]:
        """
        Extract every processable sheet of *file_path*.

        Returns:
            One ExtractionResult per non-skipped mapping with at least one
            column mapping, in input order.
        """
        results: List[ExtractionResult] = []
        for raw in mappings:
            try:
                mapping = _as_sheet_mapping(raw)
            except ValidationError as e:
                if isinstance(raw, Mapping) and raw.get("skipped") is True:
                    continue
                logger.error("Invalid mapping for sheet %r: %s", _raw_field(raw, "sheetName", "sheet_name"), e)
                results.append(_rejected(raw, e))
                continue

            if not should_process(mapping):
                logger.debug("Skipping sheet '%s' (skipped=%s, %d column mappings)",
                             mapping.sheet_name, mapping.skipped, len(mapping.column_mappings))
                continue

            extractor = self.extractor_for(mapping.sheet_name)
            logger.info("Extracting sheet '%s' → %s with %s",
                        mapping.sheet_name, mapping.target_collection, type(extractor).__name__)
            results.append(extractor.safe_extract(file_path, mapping))

        logger.info(
            "extract_data: %d sheets, %d records, %d errors",
            len(results),
            sum(r.stats.extracted for r in results),
            sum(r.stats.errored for r in results),
        )
        return results


def extract_data(
    file_path: str,
    mappings: Iterable[MappingInput],
    profile_lookup: Optional[ProfileLookup] = None,
    max_rows: Optional[int] = None,
) -> List[ExtractionResult]:
    """Convenience wrapper around ``SheetExtractionOrchestrator.extract_data``."""
    orchestrator = SheetExtractionOrchestrator(profile_lookup=profile_lookup, max_rows=max_rows)
    return orchestrator.extract_data(file_path, mappings)
