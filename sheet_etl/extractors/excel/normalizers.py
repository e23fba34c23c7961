"""
Named value normalisers and the transform registry.

Every normaliser is a pure single-argument function: raw cell value in,
normalised scalar (or ``None``) out.  ``TRANSFORM_MAP`` is the read-only
lookup that column mappings refer to by name; an unknown name means
"leave the value as it is".
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from sheet_etl.extractors.excel.config import LEADING_FLOAT_RE
from sheet_etl.extractors.excel.data_cleaner import DataCleaner

Transform = Callable[[Any], Any]


# ---------------------------------------------------------------------------
# Numeric parsing
# ---------------------------------------------------------------------------

def parse_leading_float(text: str) -> Optional[float]:
    """
    Parse the numeric prefix of *text* (``"12.5kg"`` → ``12.5``).

    Returns ``None`` when *text* does not start with a number or the
    result is not finite.
    """
    m = LEADING_FLOAT_RE.match(text.strip())
    if not m:
        return None
    try:
        n = float(m.group(0))
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_KR_DATE_RE = re.compile(r"^(\d{2,4})[.\-/](\d{1,2})[.\-/](\d{1,2})$")   # 2026.02.22, 26-01-05
_WEEK_CODE_RE = re.compile(r"^(\d{2})-(\d{1,2})-(\d{1,2})$")               # 26-1-1


def normalize_date(raw: Any) -> Optional[str]:
    """Date cells, ISO strings and Korean short dates → ``YYYY-MM-DD``."""
    if DataCleaner.is_missing(raw):
        return None
    if isinstance(raw, datetime):
        if raw.tzinfo is not None:
            raw = raw.astimezone(timezone.utc)
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()

    s = str(raw).strip()
    if not s:
        return None
    if _ISO_DATE_RE.match(s):
        return s[:10]

    m = _KR_DATE_RE.match(s)
    if m:
        year = int(m.group(1))
        if year < 100:
            year += 2000
        return f"{year}-{int(m.group(2)):02d}-{int(m.group(3)):02d}"
    return None


def normalize_week_code(raw: Any) -> Optional[str]:
    """Week code ``"26-1-1"`` → ``"2026-01-W1"``; ISO dates pass through."""
    if DataCleaner.is_missing(raw):
        return None
    s = str(raw).strip()
    if not s:
        return None
    if _ISO_DATE_RE.match(s):
        return s
    m = _WEEK_CODE_RE.match(s)
    if not m:
        return None
    return f"{2000 + int(m.group(1))}-{int(m.group(2)):02d}-W{m.group(3)}"


# ---------------------------------------------------------------------------
# Amounts and percentages
# ---------------------------------------------------------------------------

AMOUNT_ERROR_VALUES = frozenset({
    "#REF!", "#N/A", "#VALUE!", "#DIV/0!", "#NAME?", "#NULL!", "알 수 없음", "N/A", "-",
})
_AMOUNT_NOISE_RE = re.compile(r"[,\s원₩]")


def normalize_amount(raw: Any) -> Optional[float]:
    """``"1,000원"`` / ``"₩ 2,500"`` / ``1000`` → number; error markers → ``None``."""
    if DataCleaner.is_missing(raw):
        return None
    if _is_number(raw):
        return raw if math.isfinite(raw) else None
    s = str(raw).strip()
    if not s or s in AMOUNT_ERROR_VALUES:
        return None
    return parse_leading_float(_AMOUNT_NOISE_RE.sub("", s))


def normalize_percent(raw: Any) -> Optional[float]:
    """``"59.18%"``, ``59.18`` and ``0.5918`` all → ``0.5918``."""
    if DataCleaner.is_missing(raw):
        return None
    if _is_number(raw):
        return raw / 100 if raw > 1 else raw
    n = parse_leading_float(str(raw).strip().replace("%", "", 1))
    if n is None:
        return None
    return n / 100 if n > 1 else n


# ---------------------------------------------------------------------------
# Enum labels
# ---------------------------------------------------------------------------

PAYMENT_METHOD_MAP: Mapping[str, str] = MappingProxyType({
    "계좌이체": "BANK_TRANSFER",
    "법인카드": "CARD",
    "현금": "CASH",
    "수표": "CHECK",
})

PROJECT_STATUS_MAP: Mapping[str, str] = MappingProxyType({
    "계약전": "CONTRACT_PENDING",
    "사업진행중": "IN_PROGRESS",
    "사업종료": "COMPLETED",
    "종료(잔금대기)": "COMPLETED_PENDING_PAYMENT",
    "제안서작성중": "CONTRACT_PENDING",
    "서류제출완료": "CONTRACT_PENDING",
    "연속사업": "IN_PROGRESS",
    "26년 계획확인": "CONTRACT_PENDING",
})

PROJECT_TYPE_MAP: Mapping[str, str] = MappingProxyType({
    "AC": "CONSULTING",
    "컨설팅": "CONSULTING",
    "교육": "OTHER",
    "공간": "SPACE_BIZ",
    "투자": "IMPACT_INVEST",
    "개발협력": "DEV_COOPERATION",
    "KOICA": "DEV_COOPERATION",
})

SETTLEMENT_TYPE_MAP: Mapping[str, str] = MappingProxyType({
    "Type1": "TYPE1",
    "Type2": "TYPE2",
    "Type4": "TYPE4",
    "Type1. 세금계산서발행+공급가액": "TYPE1",
    "Type2. 세금계산서발행+공급대가": "TYPE2",
    "Type4. 세금계산서미발행+공급대가": "TYPE4",
    "세금계산서발행+공급가액기준": "TYPE1",
    "세금계산서발행+공급대가기준": "TYPE2",
})

ACCOUNT_TYPE_MAP: Mapping[str, str] = MappingProxyType({
    "전용통장": "DEDICATED",
    "전용계좌": "DEDICATED",
    "운영통장": "OPERATING",
    "운영계좌": "OPERATING",
})


def _match_label(s: str, table: Mapping[str, str]) -> Optional[str]:
    """Exact label first, then the first label contained in *s*."""
    if s in table:
        return table[s]
    for label, code in table.items():
        if label in s:
            return code
    return None


def normalize_payment_method(raw: Any) -> Optional[str]:
    """``"법인카드(뒷번호1)"`` → ``"CARD"``; unknown text → ``"OTHER"``."""
    s = DataCleaner.text_or_none(raw)
    if s is None:
        return None
    return _match_label(s, PAYMENT_METHOD_MAP) or "OTHER"


def normalize_project_status(raw: Any) -> Optional[str]:
    s = DataCleaner.text_or_none(raw)
    if s is None:
        return None
    return _match_label(s, PROJECT_STATUS_MAP)


def normalize_project_type(raw: Any) -> Optional[str]:
    s = DataCleaner.text_or_none(raw)
    if s is None:
        return None
    return _match_label(s, PROJECT_TYPE_MAP) or "OTHER"


def normalize_settlement_type(raw: Any) -> Optional[str]:
    """Matched with all whitespace removed on both sides."""
    s = DataCleaner.compact(raw)
    if not s:
        return None
    for label, code in SETTLEMENT_TYPE_MAP.items():
        if DataCleaner.compact(label) in s:
            return code
    return None


def normalize_account_type(raw: Any) -> Optional[str]:
    s = DataCleaner.text_or_none(raw)
    if s is None:
        return None
    for label, code in ACCOUNT_TYPE_MAP.items():
        if label in s:
            return code
    return "NONE"


def normalize_string(raw: Any) -> Optional[str]:
    """Trimmed string, blank → ``None``."""
    if DataCleaner.is_missing(raw):
        return None
    s = str(raw).strip()
    return s or None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

TRANSFORM_MAP: Mapping[str, Transform] = MappingProxyType({
    "normalizeDate": normalize_date,
    "normalizeAmount": normalize_amount,
    "normalizePercent": normalize_percent,
    "normalizePaymentMethod": normalize_payment_method,
    "normalizeProjectStatus": normalize_project_status,
    "normalizeProjectType": normalize_project_type,
    "normalizeSettlementType": normalize_settlement_type,
    "normalizeAccountType": normalize_account_type,
    "normalizeString": normalize_string,
    "normalizeWeekCode": normalize_week_code,
})


def apply_transform(name: Optional[str], value: Any, registry: Mapping[str, Transform] = TRANSFORM_MAP) -> Any:
    """Run the named transform; unknown or empty names return *value* unchanged."""
    if not name:
        return value
    fn = registry.get(name)
    if fn is None:
        return value
    return fn(value)
