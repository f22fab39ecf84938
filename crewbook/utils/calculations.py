"""
Pay formulas and Rupiah formatting.

WORK_HOURS_PER_DAY and OVERTIME_MULTIPLIER are fixed business constants.
"""

WORK_HOURS_PER_DAY = 8
OVERTIME_MULTIPLIER = 1.5


def calculate_regular_pay(daily_rate: float, days_worked: float) -> float:
    return daily_rate * days_worked


def hourly_rate_from_daily(daily_rate: float) -> float:
    return daily_rate / WORK_HOURS_PER_DAY


def calculate_overtime_pay(hourly_rate: float, overtime_hours: float) -> float:
    return hourly_rate * overtime_hours * OVERTIME_MULTIPLIER


def calculate_total_pay(regular_pay: float, overtime_pay: float) -> float:
    return regular_pay + overtime_pay


def format_currency(amount: float) -> str:
    """1975000 -> 'Rp 1.975.000' (no decimals, dot as thousands separator)."""
    sign = "-" if amount < 0 else ""
    grouped = f"{round(abs(amount)):,}".replace(",", ".")
    return f"{sign}Rp {grouped}"
