from datetime import datetime

import pytest
from openpyxl import Workbook

from sheet_etl.extractors.excel.header_detector import HeaderDetector
from sheet_etl.extractors.excel.reader import ExcelReader, SheetNotFoundError, synthesize_headers


def _write_multirow_header_xlsx(path: str) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "거래내역"

    ws["A1"] = "<입금합계>"
    ws.merge_cells("A1:B1")
    ws["C1"] = "비고"
    ws["D1"] = "날짜"
    ws.append(["입금액(사업비)", "매입부가세 반환", None, None])
    ws.append([1000, 100, "메모", datetime(2026, 1, 5)])
    ws.append([None, None, None, None])
    ws.append([2000, None, None, datetime(2026, 1, 6)])

    wb.save(path)


def _write_simple_xlsx(path: str) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "재직자명단"
    ws.append(["번호", "성명", "직급"])
    ws.append([1, "김철수", "매니저"])
    ws.append([2, "이영희", "리드"])
    wb.save(path)


def test_parse_sheet_with_multirow_header(tmp_path):
    xlsx_path = tmp_path / "multirow.xlsx"
    _write_multirow_header_xlsx(str(xlsx_path))

    parsed = ExcelReader().parse_sheet(str(xlsx_path), "거래내역", header_row_count=2)

    assert parsed.headers == [
        "입금합계 > 입금액(사업비)",
        "입금합계 > 매입부가세 반환",
        "비고",
        "날짜",
    ]
    # The fully empty row is dropped.
    assert len(parsed.rows) == 2
    assert parsed.rows[0] == {
        "입금합계 > 입금액(사업비)": 1000,
        "입금합계 > 매입부가세 반환": 100,
        "비고": "메모",
        "날짜": "2026-01-05",
    }
    assert parsed.rows[1]["날짜"] == "2026-01-06"


def test_parse_sheet_auto_detects_single_header(tmp_path):
    xlsx_path = tmp_path / "simple.xlsx"
    _write_simple_xlsx(str(xlsx_path))

    parsed = ExcelReader().parse_sheet(str(xlsx_path), "재직자명단")

    assert parsed.headers == ["번호", "성명", "직급"]
    assert [r["성명"] for r in parsed.rows] == ["김철수", "이영희"]


def test_parse_sheet_respects_max_rows(tmp_path):
    xlsx_path = tmp_path / "simple.xlsx"
    _write_simple_xlsx(str(xlsx_path))

    parsed = ExcelReader().parse_sheet(str(xlsx_path), "재직자명단", header_row_count=1, max_rows=1)
    assert len(parsed.rows) == 1


def test_error_cells_read_as_none_but_error_like_text_is_kept(tmp_path):
    xlsx_path = tmp_path / "errors.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.title = "재직자명단"
    ws.append(["성명", "참여율", "비고"])
    ws["A2"] = "김철수"
    ws["B2"] = "#DIV/0!"
    ws["C2"] = "#N/A"
    ws["C2"].data_type = "s"
    wb.save(str(xlsx_path))

    sheet = ExcelReader().open_worksheet(str(xlsx_path), "재직자명단")
    assert sheet.cell_value(2, 2) == {"error": "#DIV/0!"}

    parsed = ExcelReader().parse_sheet(str(xlsx_path), "재직자명단", header_row_count=1)
    assert parsed.rows == [{"성명": "김철수", "참여율": None, "비고": "#N/A"}]


def test_parse_sheet_with_header_start_override(tmp_path):
    xlsx_path = tmp_path / "offset.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.title = "확정사업 관리"
    ws.append(["확정사업 관리 현황"])
    ws.append([])
    ws.append(["사업명", "발주기관"])
    ws.append(["사업A", "기관A"])
    wb.save(str(xlsx_path))

    parsed = ExcelReader().parse_sheet(
        str(xlsx_path), "확정사업 관리", header_row_count=1, header_start_row=3, data_start_row=4,
    )
    assert parsed.headers == ["사업명", "발주기관"]
    assert parsed.rows == [{"사업명": "사업A", "발주기관": "기관A"}]


def test_missing_sheet_raises(tmp_path):
    xlsx_path = tmp_path / "simple.xlsx"
    _write_simple_xlsx(str(xlsx_path))

    with pytest.raises(SheetNotFoundError, match='Sheet "없는시트" not found'):
        ExcelReader().open_worksheet(str(xlsx_path), "없는시트")
    assert issubclass(SheetNotFoundError, ValueError)


def test_open_worksheet_exposes_merges(tmp_path):
    xlsx_path = tmp_path / "multirow.xlsx"
    _write_multirow_header_xlsx(str(xlsx_path))

    sheet = ExcelReader().open_worksheet(str(xlsx_path), "거래내역")
    assert sheet.merge_ranges() == ["A1:B1"]
    assert sheet.row_count == 5
    assert sheet.column_count == 4
    assert sheet.cell_value(1, 1) == "<입금합계>"


def test_synthesize_headers_empty_column_gets_placeholder() -> None:
    headers = synthesize_headers([["구분", None], ["구분", None]])
    assert headers == ["구분", "col_2"]


def test_header_detector_single_header_row() -> None:
    boundary = HeaderDetector().detect_boundary([["번호", "성명"], [1, "김철수"], [2, "이영희"]])
    assert (boundary.header_row_count, boundary.data_start_row) == (1, 2)


def test_header_detector_two_header_rows() -> None:
    rows = [
        ["구분", "입금", None],
        ["항목", "금액", "잔액"],
        ["인건비", 1000, "2,000"],
    ]
    boundary = HeaderDetector().detect_boundary(rows)
    assert (boundary.header_row_count, boundary.data_start_row) == (2, 3)


def test_header_detector_sequence_column() -> None:
    rows = [
        ["No", "사업명", "발주기관"],
        ["", "", "비고"],
        [1, "사업A", "기관A"],
    ]
    boundary = HeaderDetector().detect_boundary(rows)
    assert boundary.header_row_count == 2
