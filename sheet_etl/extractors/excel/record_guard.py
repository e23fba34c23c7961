"""
Collection-specific admission rules applied before a record is kept.

They drop spreadsheet summary and subtotal rows: rows that carry numbers
but no row-level identity.  Collections without a rule admit everything.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from sheet_etl.ir import ExtractedRecord

TRANSACTION_AMOUNT_FIELDS = ("expenseAmount", "depositAmount", "bankAmount", "balanceAfter")

PROJECT_IDENTITY_FIELDS = (
    "name",
    "clientOrg",
    "budgetCategory",
    "budgetSubCategory",
    "budgetDetail",
    "expenseCategory",
)


def is_present(value: Any) -> bool:
    """Not ``None`` and not a blank string."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _keep_transaction(record: ExtractedRecord) -> bool:
    has_date_or_week = is_present(record.get("dateTime")) or is_present(record.get("weekCode"))
    has_method = is_present(record.get("method"))
    amounts = record.get("amounts")
    if not isinstance(amounts, Mapping):
        amounts = {}
    has_amount = any(amounts.get(f) is not None for f in TRANSACTION_AMOUNT_FIELDS)
    return has_date_or_week and has_method and has_amount


def _keep_project(record: ExtractedRecord) -> bool:
    return any(is_present(record.get(f)) for f in PROJECT_IDENTITY_FIELDS)


_RULES: Dict[str, Callable[[ExtractedRecord], bool]] = {
    "transactions": _keep_transaction,
    "projects": _keep_project,
}


def should_keep_record(record: ExtractedRecord, collection: str) -> bool:
    rule = _RULES.get(collection)
    if rule is None:
        return True
    return rule(record)
