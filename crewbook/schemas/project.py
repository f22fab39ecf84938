import datetime as dt
from typing import Literal

from crewbook.schemas.common import CamelModel

ProjectStatus = Literal["planning", "active", "completed", "paused", "cancelled"]


class ProjectCreate(CamelModel):
    name: str = ""
    description: str = ""
    location: str = ""
    start_date: dt.date
    end_date: dt.date | None = None
    status: ProjectStatus = "planning"
    budget: float
    spent: float = 0
    workers: list[str] = []      # worker ids
    manager: str = ""
    progress: float = 0
    images: list[str] = []


class Project(ProjectCreate):
    id: str
    qr_code: str | None = None
