import datetime as dt
from typing import Literal

from crewbook.schemas.common import CamelModel

TransactionType = Literal["income", "expense"]
TransactionStatus = Literal["completed", "pending", "cancelled"]


class TransactionCreate(CamelModel):
    type: TransactionType
    category: str = ""
    amount: float
    description: str = ""
    date: dt.date
    status: TransactionStatus = "completed"
    project_id: str | None = None
    receipt: str | None = None


class Transaction(TransactionCreate):
    id: str
    created_by: str
