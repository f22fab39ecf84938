"""
DataService: validation and construction of all domain records, payroll
calculation, and the integrity scan/repair over the stored collections.

Creation methods never write to the store – callers persist the returned
record (see RecordStore). Every public method runs inside an error boundary,
so failures are logged with the method name before they reach the caller.
"""
from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from crewbook.core.boundary import error_boundary
from crewbook.core.config import settings
from crewbook.core.storage import ATTENDANCE_KEY, PAYROLL_KEY, TRANSACTIONS_KEY, WORKERS_KEY
from crewbook.schemas import (
    AttendanceCreate,
    AttendanceRecord,
    CleanupReport,
    IntegrityReport,
    Material,
    MaterialCreate,
    OvertimeCreate,
    OvertimeRecord,
    PayrollRecord,
    PayrollWorker,
    Project,
    ProjectCreate,
    Transaction,
    TransactionCreate,
    Worker,
    WorkerCreate,
)
from crewbook.utils.calculations import (
    OVERTIME_MULTIPLIER,
    calculate_overtime_pay,
    calculate_regular_pay,
    calculate_total_pay,
    hourly_rate_from_daily,
)
from crewbook.utils.validation import as_utc, is_valid_period, parse_date

if TYPE_CHECKING:
    from crewbook.core.errors import ErrorHandler
    from crewbook.core.safe_storage import SafeStorage
    from crewbook.services.notification_service import NotificationSink

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

MIN_WORKER_DAILY_RATE = 1000
MAX_DAYS_WORKED       = 31
MAX_OVERTIME_HOURS    = 12

def _new_id() -> str:
    return str(uuid.uuid4())


class DataService:

    def __init__(
        self,
        storage: "SafeStorage",
        error_handler: "ErrorHandler",
        notifications: "NotificationSink",
        current_user: str | None = None,
        large_transaction_threshold: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.storage = storage
        self.error_handler = error_handler
        self.notifications = notifications
        self.current_user = current_user or settings.CURRENT_USER
        self.large_transaction_threshold = (
            large_transaction_threshold
            if large_transaction_threshold is not None
            else settings.LARGE_TRANSACTION_THRESHOLD
        )
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _now(self) -> datetime:
        return as_utc(self._clock())

    def _invalid(self, message: str) -> Exception:
        return self.error_handler.create_validation_error(message)

    def _coerce(self, model_cls: type[M], data: M | BaseModel | Mapping[str, Any]) -> M:
        """Input model or mapping -> model_cls; type errors become validation errors."""
        if type(data) is model_cls:
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump()
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            first = e.errors(include_url=False)[0]
            field = ".".join(str(p) for p in first["loc"]) or model_cls.__name__
            raise self.error_handler.create_validation_error(
                f"{field}: {first['msg']}",
                {"errors": e.errors(include_url=False, include_context=False)},
            ) from e

    # ── Workers ──────────────────────────────────────────────────────────────

    @error_boundary("DataService.create_worker")
    def create_worker(self, data: WorkerCreate | Mapping[str, Any]) -> Worker:
        payload = self._coerce(WorkerCreate, data)

        if len(payload.name) < 2:
            raise self._invalid("Worker name must be at least 2 characters")
        if payload.daily_rate < MIN_WORKER_DAILY_RATE:
            raise self._invalid("Daily rate must be at least Rp 1.000")

        return Worker(
            **payload.model_dump(exclude={"skills", "join_date"}),
            id=_new_id(),
            join_date=payload.join_date or self._now().date(),
            skills=list(payload.skills or []),
        )

    # ── Payroll ──────────────────────────────────────────────────────────────

    @error_boundary("DataService.calculate_payroll")
    def calculate_payroll(
        self,
        worker: Worker | PayrollWorker | Mapping[str, Any],
        days_worked: float,
        overtime_hours: float = 0,
        period: str | None = None,
    ) -> PayrollRecord:
        worker = self._coerce(PayrollWorker, worker)
        now = self._now()
        if period is None:
            period = now.strftime("%Y-%m")

        if days_worked < 0 or days_worked > MAX_DAYS_WORKED:
            raise self._invalid("Days worked must be between 0 and 31")
        if overtime_hours < 0:
            raise self._invalid("Overtime hours cannot be negative")
        if not is_valid_period(period):
            raise self._invalid("Period must use the YYYY-MM format")

        regular_pay = calculate_regular_pay(worker.daily_rate, days_worked)
        overtime_pay = calculate_overtime_pay(hourly_rate_from_daily(worker.daily_rate), overtime_hours)

        return PayrollRecord(
            id=_new_id(),
            worker_id=worker.id,
            worker_name=worker.name,
            period=period,
            days_worked=days_worked,
            daily_rate=worker.daily_rate,
            regular_pay=regular_pay,
            overtime=overtime_pay,
            total_pay=calculate_total_pay(regular_pay, overtime_pay),
            status="pending",
            created_at=now,
        )

    # ── Cash flow ────────────────────────────────────────────────────────────

    @error_boundary("DataService.create_transaction")
    def create_transaction(self, data: TransactionCreate | Mapping[str, Any]) -> Transaction:
        payload = self._coerce(TransactionCreate, data)

        if payload.amount <= 0:
            raise self._invalid("Transaction amount must be greater than 0")
        if len(payload.description) < 5:
            raise self._invalid("Description must be at least 5 characters")

        transaction = Transaction(
            **payload.model_dump(),
            id=_new_id(),
            created_by=self.current_user,
        )

        if payload.amount > self.large_transaction_threshold:
            self.notifications.alert_large_transaction(payload.amount, payload.type)

        return transaction

    # ── Overtime ─────────────────────────────────────────────────────────────

    @error_boundary("DataService.create_overtime_record")
    def create_overtime_record(self, data: OvertimeCreate | Mapping[str, Any]) -> OvertimeRecord:
        payload = self._coerce(OvertimeCreate, data)

        if payload.hours <= 0 or payload.hours > MAX_OVERTIME_HOURS:
            raise self._invalid("Overtime hours must be between 0.5 and 12")
        if payload.rate <= 0:
            raise self._invalid("Overtime rate must be greater than 0")

        return OvertimeRecord(
            **payload.model_dump(),
            id=_new_id(),
            total=payload.hours * payload.rate * OVERTIME_MULTIPLIER,
            status="pending",
        )

    # ── Projects & materials ─────────────────────────────────────────────────

    @error_boundary("DataService.create_project")
    def create_project(self, data: ProjectCreate | Mapping[str, Any]) -> Project:
        payload = self._coerce(ProjectCreate, data)

        if len(payload.name) < 3:
            raise self._invalid("Project name must be at least 3 characters")
        if payload.budget <= 0:
            raise self._invalid("Project budget must be greater than 0")
        if payload.end_date and payload.start_date > payload.end_date:
            raise self._invalid("Start date cannot be after end date")

        return Project(**payload.model_dump(), id=_new_id())

    @error_boundary("DataService.create_material")
    def create_material(self, data: MaterialCreate | Mapping[str, Any]) -> Material:
        payload = self._coerce(MaterialCreate, data)

        if len(payload.name) < 2:
            raise self._invalid("Material name must be at least 2 characters")
        if payload.price_per_unit <= 0:
            raise self._invalid("Material price must be greater than 0")
        if payload.stock < 0 or payload.min_stock < 0:
            raise self._invalid("Stock cannot be negative")

        return Material(**payload.model_dump(), id=_new_id(), last_updated=self._now())

    # ── Attendance ───────────────────────────────────────────────────────────

    @error_boundary("DataService.create_attendance_record")
    def create_attendance_record(
        self, data: AttendanceCreate | Mapping[str, Any]
    ) -> AttendanceRecord:
        payload = self._coerce(AttendanceCreate, data)

        if len(payload.worker_name) < 2:
            raise self._invalid("Worker name is required")
        if not payload.location:
            raise self._invalid("Location is required")

        check_in = as_utc(payload.check_in)
        if check_in > self._now():
            raise self._invalid("Check-in time cannot be in the future")
        if payload.check_out and as_utc(payload.check_out) <= check_in:
            raise self._invalid("Check-out time must be after check-in")

        return AttendanceRecord(**payload.model_dump(), id=_new_id())

    # ── Integrity ────────────────────────────────────────────────────────────

    def _load_raw(self, key: str) -> list[dict[str, Any]]:
        """Stored collection as plain dicts; a missing key is an empty list.

        A failed store read raises instead of looking like a missing key.
        """
        raw = self.storage.read_item(key)
        records = json.loads(raw) if raw else []
        if not isinstance(records, list):
            raise ValueError(f"{key} is not a list")
        return records

    def _is_future(self, value: Any) -> bool:
        # unparsable dates are left alone by both scan and repair
        d = parse_date(value)
        return d is not None and d > self._now().date()

    @staticmethod
    def _worker_ids(workers: list[dict[str, Any]]) -> set:
        return {w.get("id") for w in workers}

    @error_boundary("DataService.validate_data_integrity")
    def validate_data_integrity(self) -> IntegrityReport:
        return self._scan()

    def _scan(self) -> IntegrityReport:
        report = IntegrityReport()
        try:
            worker_ids = self._worker_ids(self._load_raw(WORKERS_KEY))
            orphaned = [p for p in self._load_raw(PAYROLL_KEY) if p.get("workerId") not in worker_ids]
            if orphaned:
                report.issues.append(f"{len(orphaned)} payroll record(s) without a matching worker")

            negative = [t for t in self._load_raw(TRANSACTIONS_KEY) if t.get("amount", 0) < 0]
            if negative:
                report.issues.append(f"{len(negative)} transaction(s) with a negative amount")

            future = [a for a in self._load_raw(ATTENDANCE_KEY) if self._is_future(a.get("date"))]
            if future:
                report.issues.append(f"{len(future)} attendance record(s) dated in the future")
        except Exception as e:
            # store read failures and unparsable collections alike
            raise self.error_handler.create_business_logic_error(
                "Failed to validate data integrity", {"reason": str(e)}
            ) from e

        return report

    @error_boundary("DataService.cleanup_data")
    def cleanup_data(self) -> CleanupReport:
        integrity = self._scan()
        report = CleanupReport(issues=list(integrity.issues))
        if integrity.is_valid:
            return report

        self.notifications.warning(f"Found {len(integrity.issues)} data issue(s). Cleaning up...")

        repairs = (
            (PAYROLL_KEY, self._keep_known_workers, "orphaned records"),
            (TRANSACTIONS_KEY, lambda: lambda t: t.get("amount", 0) >= 0, "negative amounts"),
            (ATTENDANCE_KEY, lambda: lambda a: not self._is_future(a.get("date")), "future dates"),
        )
        for key, make_filter, label in repairs:
            removed = self._repair(key, make_filter, label)
            if removed is not None:
                report.removed[key] = removed

        self.notifications.success("Data cleaned up successfully")
        return report

    def _keep_known_workers(self) -> Callable[[dict[str, Any]], bool]:
        worker_ids = self._worker_ids(self._load_raw(WORKERS_KEY))
        return lambda p: p.get("workerId") in worker_ids

    def _repair(
        self,
        key: str,
        make_filter: Callable[[], Callable[[dict[str, Any]], bool]],
        label: str,
    ) -> int | None:
        """Rewrites one collection keeping only records accepted by the filter.

        Returns the number of dropped records, or None if the category could
        not be repaired (logged, other categories continue).
        """
        try:
            keep = make_filter()
            records = self._load_raw(key)
            valid = [r for r in records if keep(r)]
        except Exception:
            logger.exception("Failed to fix %s", label)
            return None

        if not self.storage.set_item(key, json.dumps(valid)):
            logger.error("Failed to fix %s: could not write %s", label, key)
            return None
        return len(records) - len(valid)
