import datetime as dt
from typing import Literal

from crewbook.schemas.common import CamelModel

OvertimeStatus = Literal["pending", "approved", "rejected"]


class OvertimeCreate(CamelModel):
    worker_id: str
    worker_name: str = ""
    date: dt.date
    hours: float
    rate: float                  # pay per hour
    description: str = ""
    project_id: str | None = None
    approved_by: str | None = None


class OvertimeRecord(OvertimeCreate):
    id: str
    total: float                 # hours * rate * 1.5
    status: OvertimeStatus = "pending"
