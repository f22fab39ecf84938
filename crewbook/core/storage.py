"""
Key/value store backing all persisted collections.

Each key holds one JSON document (usually an array of records). The SQL
implementation keeps one row per key in `storage_items`.
"""
from typing import Protocol

from sqlalchemy import Engine, select

from crewbook.core.database import make_session_factory
from crewbook.models.storage_item import StorageItem

WORKERS_KEY = "workers"
PAYROLL_KEY = "payrollRecords"
TRANSACTIONS_KEY = "transactions"
OVERTIME_KEY = "overtimeRecords"
PROJECTS_KEY = "projects"
MATERIALS_KEY = "materials"
ATTENDANCE_KEY = "attendance"
ERRORS_KEY = "app_errors"

COLLECTION_KEYS = (
    WORKERS_KEY,
    PAYROLL_KEY,
    TRANSACTIONS_KEY,
    OVERTIME_KEY,
    PROJECTS_KEY,
    MATERIALS_KEY,
    ATTENDANCE_KEY,
)


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class SqlKeyValueStore:
    """KeyValueStore on top of a SQLAlchemy engine. Errors propagate to the caller."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = make_session_factory(engine)

    def get_item(self, key: str) -> str | None:
        with self._session_factory() as session:
            item = session.get(StorageItem, key)
            return item.value if item else None

    def set_item(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            item = session.get(StorageItem, key)
            if item is None:
                session.add(StorageItem(key=key, value=value))
            else:
                item.value = value
            session.commit()

    def remove_item(self, key: str) -> None:
        with self._session_factory() as session:
            item = session.get(StorageItem, key)
            if item is not None:
                session.delete(item)
                session.commit()

    def keys(self) -> list[str]:
        with self._session_factory() as session:
            result = session.execute(select(StorageItem.key).order_by(StorageItem.key))
            return list(result.scalars().all())
