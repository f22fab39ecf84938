"""
Dashboard statistics aggregated over all stored collections.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable

from crewbook.core.storage import (
    ATTENDANCE_KEY,
    MATERIALS_KEY,
    OVERTIME_KEY,
    PAYROLL_KEY,
    PROJECTS_KEY,
    TRANSACTIONS_KEY,
    WORKERS_KEY,
)
from crewbook.utils.validation import CashFlowHealth, as_utc, validate_cash_flow_balance

if TYPE_CHECKING:
    from crewbook.services.record_store import RecordStore


def week_range(day: date) -> tuple[date, date]:
    """Monday..Sunday of the week containing day."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


@dataclass
class DashboardStats:
    total_workers: int = 0
    active_workers: int = 0
    monthly_payroll: float = 0
    pending_payrolls: int = 0
    total_income: float = 0
    total_expenses: float = 0
    monthly_income: float = 0
    monthly_expenses: float = 0
    pending_overtimes: int = 0
    weekly_overtime_hours: float = 0
    total_overtime_amount: float = 0
    active_projects: int = 0
    completed_projects: int = 0
    total_project_budget: float = 0
    total_project_spent: float = 0
    total_materials: int = 0
    low_stock_materials: int = 0
    total_material_value: float = 0
    present_today: int = 0
    late_today: int = 0
    weekly_attendance: int = 0
    cash_flow: CashFlowHealth = field(default_factory=lambda: CashFlowHealth(True))

    @property
    def net_cash_flow(self) -> float:
        return self.total_income - self.total_expenses


class DashboardService:

    def __init__(self, records: "RecordStore", clock: Callable[[], datetime] | None = None):
        self.records = records
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def get_stats(self) -> DashboardStats:
        today = as_utc(self._clock()).date()
        month = today.strftime("%Y-%m")
        week_start, week_end = week_range(today)

        workers = self.records.load(WORKERS_KEY)
        payrolls = self.records.load(PAYROLL_KEY)
        transactions = self.records.load(TRANSACTIONS_KEY)
        overtimes = self.records.load(OVERTIME_KEY)
        projects = self.records.load(PROJECTS_KEY)
        materials = self.records.load(MATERIALS_KEY)
        attendance = self.records.load(ATTENDANCE_KEY)

        completed = [t for t in transactions if t.status == "completed"]
        income = [t for t in completed if t.type == "income"]
        expenses = [t for t in completed if t.type == "expense"]

        stats = DashboardStats(
            total_workers=len(workers),
            active_workers=sum(1 for w in workers if w.is_active),
            monthly_payroll=sum(p.total_pay for p in payrolls if p.period == month and p.status == "paid"),
            pending_payrolls=sum(1 for p in payrolls if p.status == "pending"),
            total_income=sum(t.amount for t in income),
            total_expenses=sum(t.amount for t in expenses),
            monthly_income=sum(t.amount for t in income if t.date.strftime("%Y-%m") == month),
            monthly_expenses=sum(t.amount for t in expenses if t.date.strftime("%Y-%m") == month),
            pending_overtimes=sum(1 for o in overtimes if o.status == "pending"),
            weekly_overtime_hours=sum(o.hours for o in overtimes if week_start <= o.date <= week_end),
            total_overtime_amount=sum(o.total for o in overtimes if o.status == "approved"),
            active_projects=sum(1 for p in projects if p.status == "active"),
            completed_projects=sum(1 for p in projects if p.status == "completed"),
            total_project_budget=sum(p.budget for p in projects),
            total_project_spent=sum(p.spent for p in projects),
            total_materials=len(materials),
            low_stock_materials=sum(1 for m in materials if m.stock <= m.min_stock),
            total_material_value=sum(m.stock * m.price_per_unit for m in materials),
            present_today=sum(1 for a in attendance if a.date == today and a.status == "present"),
            late_today=sum(1 for a in attendance if a.date == today and a.status == "late"),
            weekly_attendance=sum(1 for a in attendance if week_start <= a.date <= week_end),
        )
        stats.cash_flow = validate_cash_flow_balance(stats.total_income, stats.total_expenses)
        return stats
