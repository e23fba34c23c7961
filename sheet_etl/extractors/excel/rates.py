"""
Participation-rate normalisation for the participation matrix.

Rate cells mix three encodings: Excel percent cells (``0.35``), plain
integer percents (``35``) and percent strings (``"35%"``).  The rule:

- numbers in ``[0, 2]`` are already fractions and are kept as-is
- numbers above ``2`` are percents and are divided by 100, whatever
  their size (``35`` → ``0.35``, ``150`` → ``1.5``)
- strings lose ``%``, whitespace and thousands commas; a string that
  carried ``%`` is always divided by 100, otherwise the numeric rule applies
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

from sheet_etl.extractors.excel.data_cleaner import DataCleaner
from sheet_etl.extractors.excel.normalizers import parse_leading_float

FRACTION_UPPER_BOUND = 2.0

_RATE_NOISE_RE = re.compile(r"[%,\s]")


def _scale(n: float) -> float:
    # 2 itself is read as a fraction (200%), 2.01 as a percent.
    if 0 <= n <= FRACTION_UPPER_BOUND:
        return n
    if n > FRACTION_UPPER_BOUND:
        return n / 100
    return n


def normalize_rate(raw: Any) -> Optional[float]:
    """Participation rate as a fraction, or ``None`` when unreadable."""
    if DataCleaner.is_missing(raw):
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        if not math.isfinite(raw):
            return None
        return _scale(float(raw))

    s = str(raw).strip()
    if not s:
        return None
    n = parse_leading_float(_RATE_NOISE_RE.sub("", s))
    if n is None:
        return None
    if "%" in s:
        return n / 100
    return _scale(n)
