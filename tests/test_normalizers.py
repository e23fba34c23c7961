from datetime import datetime

import pytest

from sheet_etl.extractors.excel.normalizers import (
    TRANSFORM_MAP,
    apply_transform,
    normalize_account_type,
    normalize_amount,
    normalize_date,
    normalize_payment_method,
    normalize_percent,
    normalize_project_status,
    normalize_project_type,
    normalize_settlement_type,
    normalize_string,
    normalize_week_code,
    parse_leading_float,
)


def test_normalize_date_formats(sample_date_strings) -> None:
    assert normalize_date(sample_date_strings["iso_date"]) == "2026-01-05"
    assert normalize_date(sample_date_strings["iso_datetime"]) == "2026-01-05"
    assert normalize_date(sample_date_strings["dot_ymd"]) == "2026-02-22"
    assert normalize_date(sample_date_strings["slash_ymd"]) == "2026-02-22"
    assert normalize_date(sample_date_strings["two_digit_year"]) == "2026-01-05"
    assert normalize_date(sample_date_strings["invalid"]) is None
    assert normalize_date(sample_date_strings["free_text"]) is None


def test_normalize_date_cells() -> None:
    assert normalize_date(datetime(2026, 3, 1, 9, 30)) == "2026-03-01"
    assert normalize_date(None) is None
    assert normalize_date("   ") is None


def test_normalize_week_code() -> None:
    assert normalize_week_code("26-1-1") == "2026-01-W1"
    assert normalize_week_code("26-12-4") == "2026-12-W4"
    assert normalize_week_code("2026-01-05") == "2026-01-05"
    assert normalize_week_code("1주차") is None
    assert normalize_week_code(None) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,000", 1000),
        ("1,000원", 1000),
        ("₩ 2,500", 2500),
        ("-3.5", -3.5),
        (12.5, 12.5),
        (0, 0),
        ("#REF!", None),
        ("알 수 없음", None),
        ("-", None),
        ("abc", None),
        ("", None),
        (None, None),
        (float("inf"), None),
    ],
)
def test_normalize_amount(raw, expected) -> None:
    assert normalize_amount(raw) == expected


def test_normalize_percent() -> None:
    assert normalize_percent("59.18%") == pytest.approx(0.5918)
    assert normalize_percent(59.18) == pytest.approx(0.5918)
    assert normalize_percent(0.5918) == pytest.approx(0.5918)
    assert normalize_percent("n/a") is None


def test_normalize_payment_method() -> None:
    assert normalize_payment_method("계좌이체") == "BANK_TRANSFER"
    assert normalize_payment_method("법인카드(뒷번호1)") == "CARD"
    assert normalize_payment_method("상품권") == "OTHER"
    assert normalize_payment_method("  ") is None


def test_normalize_project_status_and_type() -> None:
    assert normalize_project_status("사업진행중") == "IN_PROGRESS"
    assert normalize_project_status("종료(잔금대기)") == "COMPLETED_PENDING_PAYMENT"
    assert normalize_project_status("미정") is None
    assert normalize_project_type("KOICA 사업") == "DEV_COOPERATION"
    assert normalize_project_type("기타사업") == "OTHER"


def test_normalize_settlement_type_ignores_whitespace() -> None:
    assert normalize_settlement_type("Type2. 세금계산서발행 + 공급대가") == "TYPE2"
    assert normalize_settlement_type("세금계산서 발행+공급가액 기준") == "TYPE1"
    assert normalize_settlement_type("모름") is None
    assert normalize_settlement_type(None) is None


def test_normalize_account_type() -> None:
    assert normalize_account_type("운영통장(하나)") == "OPERATING"
    assert normalize_account_type("전용계좌") == "DEDICATED"
    assert normalize_account_type("개인") == "NONE"
    assert normalize_account_type(None) is None


def test_normalize_string() -> None:
    assert normalize_string("  사업A ") == "사업A"
    assert normalize_string("") is None
    assert normalize_string(123) == "123"


def test_parse_leading_float() -> None:
    assert parse_leading_float("12.5kg") == 12.5
    assert parse_leading_float(".25") == 0.25
    assert parse_leading_float("kg12") is None
    assert parse_leading_float("1e999") is None


def test_transform_registry_names() -> None:
    assert set(TRANSFORM_MAP) == {
        "normalizeDate",
        "normalizeAmount",
        "normalizePercent",
        "normalizePaymentMethod",
        "normalizeProjectStatus",
        "normalizeProjectType",
        "normalizeSettlementType",
        "normalizeAccountType",
        "normalizeString",
        "normalizeWeekCode",
    }
    with pytest.raises(TypeError):
        TRANSFORM_MAP["custom"] = normalize_string  # type: ignore[index]


def test_apply_transform_unknown_name_passes_value_through() -> None:
    assert apply_transform("normalizeAmount", "1,000") == 1000
    assert apply_transform("normalizeNothing", "1,000") == "1,000"
    assert apply_transform(None, "x") == "x"
    assert apply_transform("normalizeAmount", float("nan")) is None
