from sheet_etl.extractors.excel.record_assembler import RecordAssembler, is_all_null, set_by_path
from sheet_etl.ir import ColumnMapping


def _mapping(excel_column, field, confidence=0.9, transform=None):
    return ColumnMapping(
        excelColumn=excel_column,
        firestoreField=field,
        confidence=confidence,
        transform=transform,
    )


def test_amount_mapping_end_to_end() -> None:
    assembler = RecordAssembler([_mapping("A", "amounts.bankAmount", transform="normalizeAmount")], {})
    assert assembler.assemble({"A": "1,000"}) == {"amounts": {"bankAmount": 1000}}


def test_unmapped_and_low_confidence_are_ignored() -> None:
    mappings = [
        _mapping("사업명", "name"),
        _mapping("비고", "unmapped"),
        _mapping("담당", "managerName", confidence=0.29),
        _mapping("발주기관", "clientOrg", confidence=0.3),
    ]
    assembler = RecordAssembler(mappings, {})

    assert [m.firestore_field for m in assembler.active_mappings] == ["name", "clientOrg"]
    record = assembler.assemble({"사업명": "사업A", "비고": "x", "담당": "김", "발주기관": "기관B"})
    assert record == {"name": "사업A", "clientOrg": "기관B"}


def test_resolved_header_is_read_and_unresolved_falls_back_to_verbatim() -> None:
    mappings = [
        _mapping("입금 > 입금액(사업비)", "amounts.depositAmount", transform="normalizeAmount"),
        _mapping("날짜", "dateTime", transform="normalizeDate"),
    ]
    resolver = {"입금 > 입금액(사업비)": "입금합계 > 입금액(사업비)"}
    assembler = RecordAssembler(mappings, resolver)

    record = assembler.assemble({"입금합계 > 입금액(사업비)": "2,500", "날짜": "2026.01.05"})
    assert record == {"amounts": {"depositAmount": 2500}, "dateTime": "2026-01-05"}


def test_missing_column_yields_none() -> None:
    assembler = RecordAssembler([_mapping("없는열", "name", transform="normalizeString")], {})
    assert assembler.assemble({"A": 1}) == {"name": None}


def test_unknown_transform_keeps_raw_value() -> None:
    assembler = RecordAssembler([_mapping("A", "memo", transform="normalizeSomethingElse")], {})
    assert assembler.assemble({"A": 7}) == {"memo": 7}


def test_set_by_path_builds_and_replaces_intermediates() -> None:
    record = {"amounts": 5}
    set_by_path(record, "amounts.bankAmount", 1000)
    set_by_path(record, "amounts.expenseAmount", 10)
    set_by_path(record, "name", "사업A")
    assert record == {"amounts": {"bankAmount": 1000, "expenseAmount": 10}, "name": "사업A"}


def test_is_all_null() -> None:
    assert is_all_null({"name": None, "clientOrg": None, "_source": {"row": 1}})
    assert not is_all_null({"name": None, "amounts": {"bankAmount": None}})
    assert not is_all_null({"name": "", "clientOrg": None})
