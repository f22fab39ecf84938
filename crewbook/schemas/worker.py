import datetime as dt

from crewbook.schemas.common import CamelModel


class WorkerCreate(CamelModel):
    name: str = ""
    daily_rate: int
    position: str = ""
    join_date: dt.date | None = None      # defaults to today
    is_active: bool = True
    phone: str | None = None
    address: str | None = None
    skills: list[str] | None = None
    profile_image: str | None = None


class Worker(CamelModel):
    id: str
    name: str
    daily_rate: int
    position: str = ""
    join_date: dt.date
    is_active: bool = True
    archived_at: dt.datetime | None = None
    skills: list[str] = []
    phone: str | None = None
    address: str | None = None
    profile_image: str | None = None
