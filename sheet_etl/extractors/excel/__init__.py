"""
Spreadsheet extraction subpackage.

Public API:
  - ExcelReader            (workbook I/O, generic sheet parsing)
  - DataCleaner            (raw cell resolution, text normalisation)
  - HeaderDetector         (header/data boundary detection)
  - MergedCellIndex        (merged-region propagation)
  - build_column_resolver  (expected → parsed header reconciliation)
  - RecordAssembler        (row → nested record)
  - should_keep_record     (collection admission rules)
  - TRANSFORM_MAP          (named normalisers)
  - normalize_rate         (participation-rate scale heuristic)
  - ExtractorConfig        (tunable thresholds)
"""

from sheet_etl.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from sheet_etl.extractors.excel.data_cleaner import DataCleaner
from sheet_etl.extractors.excel.header_detector import HeaderBoundary, HeaderDetector
from sheet_etl.extractors.excel.merged_cells import MergedCellIndex
from sheet_etl.extractors.excel.reader import (
    ExcelReader,
    OpenpyxlWorksheet,
    SheetNotFoundError,
    WorksheetAccessor,
    synthesize_headers,
)
from sheet_etl.extractors.excel.column_resolver import build_column_resolver, resolve_column
from sheet_etl.extractors.excel.normalizers import TRANSFORM_MAP, apply_transform
from sheet_etl.extractors.excel.rates import normalize_rate
from sheet_etl.extractors.excel.record_assembler import RecordAssembler, is_all_null, set_by_path
from sheet_etl.extractors.excel.record_guard import should_keep_record

__all__ = [
    "ExtractorConfig",
    "DEFAULT_CONFIG",
    "DataCleaner",
    "HeaderBoundary",
    "HeaderDetector",
    "MergedCellIndex",
    "ExcelReader",
    "OpenpyxlWorksheet",
    "SheetNotFoundError",
    "WorksheetAccessor",
    "synthesize_headers",
    "build_column_resolver",
    "resolve_column",
    "TRANSFORM_MAP",
    "apply_transform",
    "normalize_rate",
    "RecordAssembler",
    "is_all_null",
    "set_by_path",
    "should_keep_record",
]
