"""
Date and cash-flow helpers shared by the services.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(value) -> date | None:
    """ISO date (or datetime) string / object -> date; None if unparsable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def is_valid_period(period: str) -> bool:
    return bool(_PERIOD_RE.match(period or ""))


def is_valid_date_range(start: date, end: date | None) -> bool:
    if end is None:
        return True
    return start <= end


def is_not_future_date(value: date, today: date | None = None) -> bool:
    return value <= (today or date.today())


def is_working_day(value: date) -> bool:
    # Monday to Saturday
    return value.weekday() <= 5


@dataclass
class CashFlowHealth:
    is_healthy: bool
    warning: str | None = None


def validate_cash_flow_balance(income: float, expenses: float) -> CashFlowHealth:
    if income <= 0:
        if expenses > 0:
            return CashFlowHealth(False, "Expenses recorded without any income")
        return CashFlowHealth(True)

    ratio = expenses / income
    if ratio > 0.9:
        return CashFlowHealth(False, "Expenses too high (>90% of income)")
    if ratio > 0.8:
        return CashFlowHealth(True, "Attention: high expenses (>80% of income)")
    return CashFlowHealth(True)
