"""
RecordAssembler: one parsed row + column mappings → one nested record.

Mappings that are ``"unmapped"`` or below the confidence threshold are
ignored.  Values are read under the resolved header (or the expected
header verbatim when unresolved), transformed by name, and written at
the mapping's dot-path.  Transform errors propagate to the caller, which
isolates them per row.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from sheet_etl.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from sheet_etl.extractors.excel.normalizers import TRANSFORM_MAP, Transform, apply_transform
from sheet_etl.ir import UNMAPPED_FIELD, ColumnMapping, ExtractedRecord


def set_by_path(record: Dict[str, Any], path: str, value: Any) -> None:
    """
    Assign *value* at dot-path *path*, creating intermediate dicts.

    A non-dict value sitting on an intermediate segment is replaced::

        >>> r = {}
        >>> set_by_path(r, "amounts.bankAmount", 1000)
        >>> r
        {'amounts': {'bankAmount': 1000}}
    """
    parts: List[str] = path.split(".")
    current = record
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


class RecordAssembler:
    """Builds records for one sheet; holds no per-row state."""

    def __init__(
        self,
        column_mappings: Iterable[ColumnMapping],
        resolver: Mapping[str, str],
        cfg: ExtractorConfig = DEFAULT_CONFIG,
        transforms: Mapping[str, Transform] = TRANSFORM_MAP,
    ):
        self._mappings = [
            m for m in column_mappings
            if m.firestore_field != UNMAPPED_FIELD and m.confidence >= cfg.min_mapping_confidence
        ]
        self._resolver = resolver
        self._transforms = transforms

    @property
    def active_mappings(self) -> List[ColumnMapping]:
        return list(self._mappings)

    def resolve_key(self, mapping: ColumnMapping) -> str:
        return self._resolver.get(mapping.excel_column, mapping.excel_column)

    def assemble(self, row: Mapping[str, Any]) -> ExtractedRecord:
        """Build the record for *row* (without ``_source``)."""
        record: ExtractedRecord = {}
        for mapping in self._mappings:
            raw_value: Optional[Any] = row.get(self.resolve_key(mapping))
            value = apply_transform(mapping.transform, raw_value, self._transforms)
            set_by_path(record, mapping.firestore_field, value)
        return record


def is_all_null(record: Mapping[str, Any]) -> bool:
    """True when every non-underscore top-level field is ``None``."""
    return all(v is None for k, v in record.items() if not k.startswith("_"))
