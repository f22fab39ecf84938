import datetime as dt
from typing import Literal

from crewbook.schemas.common import CamelModel

PayrollStatus = Literal["pending", "paid", "cancelled"]


class PayrollRecord(CamelModel):
    id: str
    worker_id: str               # non-owning reference, may dangle after worker deletion
    worker_name: str             # snapshot at calculation time
    period: str                  # YYYY-MM
    days_worked: float
    daily_rate: int              # snapshot at calculation time
    regular_pay: float
    overtime: float
    total_pay: float
    status: PayrollStatus = "pending"
    created_at: dt.datetime
    paid_at: dt.datetime | None = None
    notes: str | None = None


class PayrollWorker(CamelModel):
    """The worker fields payroll needs; a stored Worker or a bare payload both fit."""
    id: str = ""
    name: str
    daily_rate: int
