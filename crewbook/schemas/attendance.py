import datetime as dt
from typing import Literal

from crewbook.schemas.common import CamelModel

AttendanceStatus = Literal["present", "absent", "late", "overtime"]


class AttendanceCreate(CamelModel):
    worker_id: str = ""
    worker_name: str = ""
    project_id: str = ""
    date: dt.date
    check_in: dt.datetime
    check_out: dt.datetime | None = None
    status: AttendanceStatus = "present"
    location: str = ""
    notes: str | None = None
    qr_scanned: bool = False


class AttendanceRecord(AttendanceCreate):
    id: str
