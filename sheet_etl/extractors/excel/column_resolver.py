"""
ColumnResolver: reconcile expected header strings with the headers a
sheet actually has after re-parsing.

Schema discovery synthesises composite headers on its own pass over the
workbook; the extraction-time parse can differ in whitespace or segment
order.  Each expected header is matched against the parsed headers in
four tiers, first hit wins:

1. exact match
2. unique match on the last ``" > "`` segment
3. several last-segment candidates: the first whose second-to-last
   segment contains the expected second-to-last segment
4. whitespace-free substring containment in either direction, first
   parsed header in order

Unresolved headers get no entry; callers then read the row with the
expected header verbatim.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from sheet_etl.extractors.excel.config import HEADER_SEGMENT_SEP
from sheet_etl.extractors.excel.data_cleaner import DataCleaner
from sheet_etl.logger import get_logger

logger = get_logger(__name__)


def _segments(header: str) -> List[str]:
    return header.split(HEADER_SEGMENT_SEP)


def resolve_column(expected: str, headers: Sequence[str]) -> Optional[str]:
    """Resolve one expected header; ``None`` when no tier matches."""
    if expected in headers:
        return expected

    expected_segs = _segments(expected)
    expected_last = expected_segs[-1].strip()
    candidates = [h for h in headers if _segments(h)[-1].strip() == expected_last]
    if len(candidates) == 1:
        return candidates[0]

    if len(candidates) > 1 and len(expected_segs) > 1:
        expected_parent = expected_segs[-2].strip()
        for h in candidates:
            segs = _segments(h)
            if len(segs) > 1 and expected_parent in segs[-2].strip():
                return h

    compact_expected = DataCleaner.compact(expected)
    for h in headers:
        compact_h = DataCleaner.compact(h)
        # Blank headers never contain-match.
        if not compact_h:
            continue
        if compact_expected in compact_h or compact_h in compact_expected:
            return h
    return None


def build_column_resolver(headers: Sequence[str], expected_columns: Iterable[str]) -> Dict[str, str]:
    """Map every resolvable expected header to its parsed header."""
    resolver: Dict[str, str] = {}
    headers = list(headers)
    for expected in expected_columns:
        if expected in resolver:
            continue
        actual = resolve_column(expected, headers)
        if actual is None:
            logger.debug("No parsed header matches %r; reading it verbatim", expected)
            continue
        resolver[expected] = actual
    return resolver
