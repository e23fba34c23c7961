"""
DataCleaner: value normalisation utilities for the spreadsheet pipeline.

Responsibilities:
- Raw cell resolution (``resolve_cell_value``): dates, rich text, cached
  formula results, uncached formulas and error cells → one scalar
- Empty-cell detection
- Header-text cleaning and whitespace normalisation
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Optional

import pandas as pd
from openpyxl.cell.rich_text import CellRichText
from openpyxl.worksheet.formula import ArrayFormula, DataTableFormula

from sheet_etl.extractors.excel.config import EXCEL_ERROR_CODES, WHITESPACE_RE


class DataCleaner:
    """Stateless helper that normalises raw cell values and header text."""

    # ----- raw cell → scalar -----------------------------------------------

    @staticmethod
    def resolve_cell_value(value: Any) -> Any:
        """
        Normalise one raw cell value as reported by the workbook reader.

        Checked in order, first hit wins:

        1. ``None`` / NaN / NaT → ``None``
        2. date or datetime → ``YYYY-MM-DD`` (UTC date portion)
        3. rich text → concatenated run text, no separator
        4. cached formula result → the result, ``None`` when it is an error
        5. formula without a usable cached result → ``None``
        6. object carrying a plain ``text`` string → that string
        7. error cell (``{"error": ...}``) → ``None``; text that merely
           looks like an error code is kept
        8. anything else is returned unchanged

        Mapping-shaped values (``{"richText": [...]}``, ``{"result": ...}``,
        ``{"formula": ...}``, ``{"text": ...}``, ``{"error": ...}``) are
        accepted alongside openpyxl's own types so any reader can feed it.
        """
        if DataCleaner.is_missing(value):
            return None
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, CellRichText):
            return "".join(
                part if isinstance(part, str) else (getattr(part, "text", None) or "")
                for part in value
            )
        if isinstance(value, (ArrayFormula, DataTableFormula)):
            return None
        if isinstance(value, Mapping):
            return DataCleaner._resolve_mapping_cell(value)
        return value

    @staticmethod
    def _resolve_mapping_cell(value: Mapping) -> Any:
        rich_text = value.get("richText")
        if isinstance(rich_text, (list, tuple)):
            return "".join(
                str(run.get("text") or "") if isinstance(run, Mapping) else str(run)
                for run in rich_text
            )
        if "result" in value:
            result = value.get("result")
            if DataCleaner._is_error_value(result):
                return None
            return DataCleaner.resolve_cell_value(result) if result is not None else None
        if "formula" in value or "sharedFormula" in value:
            return None
        text = value.get("text")
        if isinstance(text, str):
            return text
        if "error" in value:
            return None
        return value

    @staticmethod
    def _is_error_value(value: Any) -> bool:
        if isinstance(value, Mapping):
            return "error" in value
        return isinstance(value, str) and value.strip() in EXCEL_ERROR_CODES

    # ----- emptiness --------------------------------------------------------

    @staticmethod
    def is_missing(value: Any) -> bool:
        """``None``, float NaN or pandas NaT."""
        if value is None:
            return True
        if isinstance(value, (float, datetime, pd.Timestamp)):
            return bool(pd.isna(value))
        return False

    @staticmethod
    def is_empty(value: Any) -> bool:
        if DataCleaner.is_missing(value):
            return True
        return str(value).strip() == ""

    # ----- text normalisation -----------------------------------------------

    @staticmethod
    def normalize_text(value: Any) -> str:
        """Trim and collapse internal whitespace; ``None`` → ``""``."""
        if DataCleaner.is_missing(value):
            return ""
        return WHITESPACE_RE.sub(" ", str(value)).strip()

    @staticmethod
    def compact(value: Any) -> str:
        """Remove every whitespace character (used for label matching)."""
        if DataCleaner.is_missing(value):
            return ""
        return WHITESPACE_RE.sub("", str(value))

    @staticmethod
    def text_or_none(value: Any) -> Optional[str]:
        text = DataCleaner.normalize_text(value)
        return text or None

    @staticmethod
    def clean_header(raw: Any, max_length: int = 100) -> str:
        """
        Clean a header cell: newlines become spaces, whitespace collapses,
        angle brackets (``<입금합계>``) are dropped, length is capped.
        """
        if DataCleaner.is_missing(raw):
            return ""
        text = str(raw).strip().replace("\n", " ")
        text = WHITESPACE_RE.sub(" ", text)
        text = text.replace("<", "").replace(">", "")
        return text[:max_length]
