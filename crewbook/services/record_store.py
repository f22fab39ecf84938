"""
RecordStore: typed read/write of the stored collections.

All access goes through SafeStorage, so store failures surface as storage
errors in the error log and as False / empty results here.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from pydantic import ValidationError

from crewbook.core.boundary import error_boundary
from crewbook.core.storage import (
    ATTENDANCE_KEY,
    MATERIALS_KEY,
    OVERTIME_KEY,
    PAYROLL_KEY,
    PROJECTS_KEY,
    TRANSACTIONS_KEY,
    WORKERS_KEY,
)
from crewbook.schemas import (
    AttendanceRecord,
    Material,
    OvertimeRecord,
    PayrollRecord,
    Project,
    Transaction,
    Worker,
)
from crewbook.schemas.common import CamelModel
from crewbook.schemas.payroll import PayrollStatus

if TYPE_CHECKING:
    from crewbook.core.errors import ErrorHandler
    from crewbook.core.safe_storage import SafeStorage

logger = logging.getLogger(__name__)

COLLECTION_MODELS: dict[str, type[CamelModel]] = {
    WORKERS_KEY:      Worker,
    PAYROLL_KEY:      PayrollRecord,
    TRANSACTIONS_KEY: Transaction,
    OVERTIME_KEY:     OvertimeRecord,
    PROJECTS_KEY:     Project,
    MATERIALS_KEY:    Material,
    ATTENDANCE_KEY:   AttendanceRecord,
}


class RecordStore:

    def __init__(
        self,
        storage: "SafeStorage",
        error_handler: "ErrorHandler",
        clock: Callable[[], datetime] | None = None,
    ):
        self.storage = storage
        self.error_handler = error_handler
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ── Generic collection access ────────────────────────────────────────────

    def load(self, key: str) -> list[CamelModel]:
        """All valid records under key; unreadable entries are skipped and logged."""
        model_cls = COLLECTION_MODELS[key]
        raw = self.storage.get_json(key, [])
        if not isinstance(raw, list):
            logger.warning("Stored %s is not a list – ignoring", key)
            return []

        records = []
        for item in raw:
            try:
                records.append(model_cls.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping invalid %s entry: %s", key, e.errors(include_url=False)[0]["msg"])
        return records

    def save(self, key: str, records: list[CamelModel]) -> bool:
        return self.storage.set_json(key, [r.to_storage() for r in records])

    def append(self, key: str, record: CamelModel) -> bool:
        records = self.load(key)
        records.append(record)
        return self.save(key, records)

    def get(self, key: str, record_id: str) -> CamelModel | None:
        return next((r for r in self.load(key) if r.id == record_id), None)

    # ── Workers ──────────────────────────────────────────────────────────────

    def list_workers(self, include_archived: bool = False) -> list[Worker]:
        workers = self.load(WORKERS_KEY)
        if include_archived:
            return workers
        return [w for w in workers if w.is_active]

    def _update_worker(self, worker_id: str, **changes) -> Worker:
        workers = self.load(WORKERS_KEY)
        for i, w in enumerate(workers):
            if w.id == worker_id:
                workers[i] = w.model_copy(update=changes)
                self.save(WORKERS_KEY, workers)
                return workers[i]
        raise self.error_handler.create_business_logic_error(
            f"Worker {worker_id} not found", {"worker_id": worker_id}
        )

    @error_boundary("RecordStore.archive_worker")
    def archive_worker(self, worker_id: str) -> Worker:
        return self._update_worker(worker_id, is_active=False, archived_at=self._clock())

    @error_boundary("RecordStore.restore_worker")
    def restore_worker(self, worker_id: str) -> Worker:
        return self._update_worker(worker_id, is_active=True, archived_at=None)

    def delete_worker(self, worker_id: str) -> bool:
        """Hard delete. Payroll records keep their worker_id (cleanup removes them later)."""
        workers = self.load(WORKERS_KEY)
        remaining = [w for w in workers if w.id != worker_id]
        if len(remaining) == len(workers):
            return False
        return self.save(WORKERS_KEY, remaining)

    # ── Payroll ──────────────────────────────────────────────────────────────

    def find_payroll(self, worker_id: str, period: str) -> PayrollRecord | None:
        return next(
            (p for p in self.load(PAYROLL_KEY) if p.worker_id == worker_id and p.period == period),
            None,
        )

    @error_boundary("RecordStore.save_payroll")
    def save_payroll(self, record: PayrollRecord, overwrite: bool = False) -> bool:
        """At most one payroll per worker and period; replacing one needs overwrite=True."""
        records = self.load(PAYROLL_KEY)
        for i, existing in enumerate(records):
            if existing.worker_id == record.worker_id and existing.period == record.period:
                if not overwrite:
                    raise self.error_handler.create_business_logic_error(
                        f"Payroll for {record.worker_name} in {record.period} already exists",
                        {"existing_id": existing.id},
                    )
                records[i] = record
                break
        else:
            records.append(record)

        return self.save(PAYROLL_KEY, records)

    @error_boundary("RecordStore.update_payroll_status")
    def update_payroll_status(self, record_id: str, status: PayrollStatus) -> PayrollRecord:
        records = self.load(PAYROLL_KEY)
        for i, p in enumerate(records):
            if p.id == record_id:
                paid_at = self._clock() if status == "paid" else None
                records[i] = p.model_copy(update={"status": status, "paid_at": paid_at})
                self.save(PAYROLL_KEY, records)
                return records[i]
        raise self.error_handler.create_business_logic_error(
            f"Payroll record {record_id} not found", {"record_id": record_id}
        )
