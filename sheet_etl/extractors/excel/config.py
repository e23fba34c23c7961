"""
Centralised configuration for the spreadsheet extraction engine.

All magic numbers, regex patterns, keyword lists, and tunable thresholds
live here so that the rest of the code can stay free of hard-coded values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Pattern


# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (shared across modules)
# ---------------------------------------------------------------------------

PURE_NUMBER_RE = re.compile(r"^-?\d+([.,]\d+)?$")
DATE_PREFIX_RE = re.compile(r"^\d{4}[-/.]\d{1,2}[-/.]\d{1,2}")
SHORT_WEEK_CODE_RE = re.compile(r"^\d{2}-\d{1,2}-\d{1,2}$")
ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T")
WHITESPACE_RE = re.compile(r"\s+")

# Leading float literal, the way spreadsheet exports write numbers ("1000", "-3.5", ".25", "1e3")
LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Error codes openpyxl reports for error-typed cells
EXCEL_ERROR_CODES: FrozenSet[str] = frozenset({
    "#NULL!", "#DIV/0!", "#VALUE!", "#REF!", "#NAME?", "#NUM!", "#N/A",
    "#GETTING_DATA", "#SPILL!", "#CALC!",
})

# Hierarchical header segment separator
HEADER_SEGMENT_SEP = " > "


# ---------------------------------------------------------------------------
# ExtractorConfig: tunable thresholds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractorConfig:
    """Immutable bag of tunable thresholds used throughout extraction."""

    # Column mappings below this confidence are never applied
    min_mapping_confidence: float = 0.3

    # Header boundary auto-detection
    max_header_rows: int = 5
    data_like_ratio: float = 0.4
    header_max_length: int = 100

    # Participation matrix geometry (1-based rows / columns)
    matrix_project_row: int = 4
    matrix_client_org_row: int = 5
    matrix_department_row: int = 6
    matrix_note_row: int = 7
    matrix_stage_row: int = 8
    matrix_header_row: int = 9
    matrix_data_start_row: int = 10
    matrix_group_scan_start_col: int = 5
    matrix_group_width: int = 3

    # Stop the matrix scan after this many consecutive rows without payload
    matrix_max_empty_rows: int = 30

    matrix_footnote_marker: str = "※"
    matrix_name_label: str = "이름"
    matrix_rate_label_re: Pattern[str] = re.compile(r"(참여|투입)(율|률)")
    matrix_sheet_name_re: Pattern[str] = re.compile(r"100-\d+\.\s*참여율")


# Singleton default config
DEFAULT_CONFIG = ExtractorConfig()
