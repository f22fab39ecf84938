"""
Tests for pay formulas, Rupiah formatting and the date/cash-flow helpers.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from crewbook.utils.calculations import (
    calculate_overtime_pay,
    calculate_regular_pay,
    calculate_total_pay,
    format_currency,
    hourly_rate_from_daily,
)
from crewbook.utils.validation import (
    as_utc,
    is_not_future_date,
    is_valid_date_range,
    is_valid_period,
    is_working_day,
    parse_date,
    validate_cash_flow_balance,
)


def test_pay_formulas():
    assert calculate_regular_pay(150000, 25) == 3_750_000
    assert hourly_rate_from_daily(150000) == 18750
    assert calculate_overtime_pay(18750, 8) == 225_000
    assert calculate_total_pay(3_750_000, 225_000) == 3_975_000


@pytest.mark.parametrize("amount, expected", [
    (0, "Rp 0"),
    (999, "Rp 999"),
    (1000, "Rp 1.000"),
    (3_975_000, "Rp 3.975.000"),
    (1_234_567.6, "Rp 1.234.568"),
    (-50_000, "-Rp 50.000"),
])
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_as_utc():
    naive = datetime(2025, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    jakarta = timezone(timedelta(hours=7))
    assert as_utc(datetime(2025, 1, 1, 19, 0, tzinfo=jakarta)).hour == 12


@pytest.mark.parametrize("value, expected", [
    ("2025-09-15", date(2025, 9, 15)),
    ("2025-09-15T23:00:00Z", date(2025, 9, 15)),
    (date(2025, 9, 15), date(2025, 9, 15)),
    (datetime(2025, 9, 15, 8, 0), date(2025, 9, 15)),
    ("15/09/2025", None),
    (None, None),
    (20250915, None),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize("period, valid", [
    ("2024-01", True),
    ("2024-12", True),
    ("2024-00", False),
    ("2024-13", False),
    ("24-01", False),
    ("2024-1", False),
    (None, False),
])
def test_is_valid_period(period, valid):
    assert is_valid_period(period) is valid


def test_date_helpers():
    assert is_valid_date_range(date(2025, 1, 1), date(2025, 1, 1))
    assert is_valid_date_range(date(2025, 1, 1), None)
    assert not is_valid_date_range(date(2025, 1, 2), date(2025, 1, 1))

    today = date(2025, 9, 15)
    assert is_not_future_date(today, today)
    assert not is_not_future_date(today + timedelta(days=1), today)

    assert is_working_day(date(2025, 9, 20))      # Saturday
    assert not is_working_day(date(2025, 9, 21))  # Sunday


@pytest.mark.parametrize("income, expenses, healthy, warning", [
    (0, 0, True, None),
    (0, 100, False, "Expenses recorded without any income"),
    (1000, 500, True, None),
    (1000, 800, True, None),
    (1000, 850, True, "Attention: high expenses (>80% of income)"),
    (1000, 900, True, "Attention: high expenses (>80% of income)"),
    (1000, 950, False, "Expenses too high (>90% of income)"),
])
def test_cash_flow_balance(income, expenses, healthy, warning):
    result = validate_cash_flow_balance(income, expenses)
    assert result.is_healthy is healthy
    assert result.warning == warning
