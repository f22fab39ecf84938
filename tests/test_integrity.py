"""
Tests for the integrity scan and cleanup over the stored collections.
"""
import pytest

from crewbook.core.errors import AppError, ErrorCode
from crewbook.core.safe_storage import SafeStorage
from crewbook.core.storage import ATTENDANCE_KEY, PAYROLL_KEY, TRANSACTIONS_KEY, WORKERS_KEY
from crewbook.services.data_service import DataService
from tests.conftest import FIXED_NOW, ReadOnlyKeyStore, UnreadableKeyStore, load, seed

WORKERS = [{"id": "1", "name": "John Doe"}, {"id": "2", "name": "Budi"}]


def _payroll(record_id, worker_id):
    return {"id": record_id, "workerId": worker_id, "period": "2025-08", "totalPay": 1_000_000}


def test_empty_store_is_valid(data_service):
    report = data_service.validate_data_integrity()
    assert report.is_valid
    assert report.issues == []


def test_consistent_data_is_valid(data_service, store):
    seed(store, WORKERS_KEY, WORKERS)
    seed(store, PAYROLL_KEY, [_payroll("p1", "1"), _payroll("p2", "2")])
    seed(store, TRANSACTIONS_KEY, [{"id": "t1", "amount": 100}])
    seed(store, ATTENDANCE_KEY, [{"id": "a1", "date": "2025-09-15"}])

    assert data_service.validate_data_integrity().is_valid


def test_orphaned_payroll_is_reported(data_service, store):
    seed(store, WORKERS_KEY, WORKERS)
    seed(store, PAYROLL_KEY, [_payroll("p1", "1"), _payroll("p9", "999")])

    report = data_service.validate_data_integrity()
    assert not report.is_valid
    assert report.issues == ["1 payroll record(s) without a matching worker"]


def test_scan_does_not_modify_store(data_service, store):
    seed(store, PAYROLL_KEY, [_payroll("p9", "999")])
    data_service.validate_data_integrity()
    assert load(store, PAYROLL_KEY) == [_payroll("p9", "999")]


def test_all_issue_kinds_are_counted(data_service, store):
    seed(store, WORKERS_KEY, WORKERS)
    seed(store, PAYROLL_KEY, [_payroll("p8", "888"), _payroll("p9", "999")])
    seed(store, TRANSACTIONS_KEY, [{"id": "t1", "amount": -5}, {"id": "t2", "amount": 10}])
    seed(store, ATTENDANCE_KEY, [
        {"id": "a1", "date": "2025-09-16"},
        {"id": "a2", "date": "2025-12-01T08:00:00Z"},
        {"id": "a3", "date": "2025-09-15"},
    ])

    report = data_service.validate_data_integrity()
    assert report.issues == [
        "2 payroll record(s) without a matching worker",
        "1 transaction(s) with a negative amount",
        "2 attendance record(s) dated in the future",
    ]


def test_unparsable_attendance_date_is_not_future(data_service, store):
    seed(store, ATTENDANCE_KEY, [{"id": "a1", "date": "someday"}, {"id": "a2"}])
    assert data_service.validate_data_integrity().is_valid


def test_corrupt_collection_raises_business_error(data_service, store, error_handler):
    store.set_item(WORKERS_KEY, "{not json")

    with pytest.raises(AppError) as exc_info:
        data_service.validate_data_integrity()

    assert exc_info.value.code == ErrorCode.BUSINESS_LOGIC
    assert exc_info.value.message == "Failed to validate data integrity"
    errors = error_handler.get_errors()
    assert len(errors) == 1
    assert errors[0].details["context"] == "DataService.validate_data_integrity"


def test_non_list_collection_raises_business_error(data_service, store):
    seed(store, TRANSACTIONS_KEY, {"id": "t1"})
    with pytest.raises(AppError) as exc_info:
        data_service.validate_data_integrity()
    assert exc_info.value.code == ErrorCode.BUSINESS_LOGIC


# ── cleanup ───────────────────────────────────────────────────────────────────

def test_cleanup_on_valid_data_changes_nothing(data_service, store, notifications):
    seed(store, WORKERS_KEY, WORKERS)
    seed(store, PAYROLL_KEY, [_payroll("p1", "1")])

    report = data_service.cleanup_data()

    assert not report.cleaned
    assert report.removed == {}
    assert notifications.outbox == []
    assert load(store, PAYROLL_KEY) == [_payroll("p1", "1")]


def test_cleanup_removes_only_orphans(data_service, store, notifications):
    seed(store, WORKERS_KEY, WORKERS)
    seed(store, PAYROLL_KEY, [_payroll("p1", "1"), _payroll("p9", "999"), _payroll("p2", "2")])

    report = data_service.cleanup_data()

    assert report.cleaned
    assert report.removed[PAYROLL_KEY] == 1
    assert [p["id"] for p in load(store, PAYROLL_KEY)] == ["p1", "p2"]
    assert data_service.validate_data_integrity().is_valid

    assert [(n.level, n.message) for n in notifications.outbox] == [
        ("warning", "Found 1 data issue(s). Cleaning up..."),
        ("success", "Data cleaned up successfully"),
    ]


def test_cleanup_repairs_every_category(data_service, store):
    seed(store, WORKERS_KEY, WORKERS)
    seed(store, PAYROLL_KEY, [_payroll("p9", "999")])
    seed(store, TRANSACTIONS_KEY, [{"id": "t1", "amount": -5}, {"id": "t2", "amount": 10}])
    seed(store, ATTENDANCE_KEY, [{"id": "a1", "date": "2025-09-16"}, {"id": "a2", "date": "2025-09-14"}])

    report = data_service.cleanup_data()

    assert report.removed == {PAYROLL_KEY: 1, TRANSACTIONS_KEY: 1, ATTENDANCE_KEY: 1}
    assert load(store, PAYROLL_KEY) == []
    assert [t["id"] for t in load(store, TRANSACTIONS_KEY)] == ["t2"]
    assert [a["id"] for a in load(store, ATTENDANCE_KEY)] == ["a2"]
    assert load(store, WORKERS_KEY) == WORKERS


def test_cleanup_continues_when_one_category_fails(store, error_handler, notifications):
    seed(store, WORKERS_KEY, WORKERS)
    seed(store, PAYROLL_KEY, [_payroll("p9", "999")])
    seed(store, TRANSACTIONS_KEY, [{"id": "t1", "amount": -5}])
    seed(store, ATTENDANCE_KEY, [{"id": "a1", "date": "2025-09-16"}])

    storage = SafeStorage(ReadOnlyKeyStore(store, {TRANSACTIONS_KEY}), error_handler)
    service = DataService(storage, error_handler, notifications, clock=lambda: FIXED_NOW)

    report = service.cleanup_data()

    assert TRANSACTIONS_KEY not in report.removed
    assert report.removed[PAYROLL_KEY] == 1
    assert report.removed[ATTENDANCE_KEY] == 1
    assert load(store, TRANSACTIONS_KEY) == [{"id": "t1", "amount": -5}]
    assert load(store, PAYROLL_KEY) == []
    assert load(store, ATTENDANCE_KEY) == []

    # the failed write is reported as a storage error, cleanup still succeeds
    assert [e.code for e in error_handler.get_errors()] == [ErrorCode.STORAGE]
    assert notifications.outbox[-1].message == "Data cleaned up successfully"


def test_cleanup_with_corrupt_collection_reports_once(data_service, store, error_handler):
    store.set_item(PAYROLL_KEY, "[broken")

    with pytest.raises(AppError):
        data_service.cleanup_data()

    errors = error_handler.get_errors()
    assert len(errors) == 1
    assert errors[0].details["context"] == "DataService.cleanup_data"


# ── failed reads ──────────────────────────────────────────────────────────────

def _service_over(store, error_handler, notifications):
    storage = SafeStorage(store, error_handler)
    return DataService(storage, error_handler, notifications, clock=lambda: FIXED_NOW)


def test_scan_with_unreadable_workers_raises(store, error_handler, notifications):
    seed(store, WORKERS_KEY, [{"id": "1"}])
    seed(store, PAYROLL_KEY, [_payroll("p1", "1")])
    service = _service_over(UnreadableKeyStore(store, {WORKERS_KEY}), error_handler, notifications)

    with pytest.raises(AppError) as exc_info:
        service.validate_data_integrity()

    assert exc_info.value.code == ErrorCode.BUSINESS_LOGIC
    assert exc_info.value.message == "Failed to validate data integrity"
    assert "cannot read workers" in exc_info.value.details["reason"]


def test_cleanup_with_unreadable_workers_keeps_payroll(store, error_handler, notifications):
    seed(store, WORKERS_KEY, [{"id": "1"}])
    seed(store, PAYROLL_KEY, [_payroll("p1", "1")])
    seed(store, TRANSACTIONS_KEY, [{"id": "t1", "amount": -5}])
    service = _service_over(UnreadableKeyStore(store, {WORKERS_KEY}), error_handler, notifications)

    with pytest.raises(AppError):
        service.cleanup_data()

    assert load(store, PAYROLL_KEY) == [_payroll("p1", "1")]
    assert load(store, TRANSACTIONS_KEY) == [{"id": "t1", "amount": -5}]
    errors = error_handler.get_errors()
    assert len(errors) == 1
    assert errors[0].code == ErrorCode.BUSINESS_LOGIC
    assert errors[0].details["context"] == "DataService.cleanup_data"
    assert notifications.by_level("success") == []


def test_failed_read_during_repair_skips_only_that_category(store, error_handler, notifications, caplog):
    seed(store, WORKERS_KEY, WORKERS)
    seed(store, PAYROLL_KEY, [_payroll("p9", "999")])
    seed(store, TRANSACTIONS_KEY, [{"id": "t1", "amount": -5}])
    seed(store, ATTENDANCE_KEY, [{"id": "a1", "date": "2025-09-16"}])
    # the scan reads transactions once, the repair read fails
    flaky = UnreadableKeyStore(store, {TRANSACTIONS_KEY}, allowed_reads=1)
    service = _service_over(flaky, error_handler, notifications)

    report = service.cleanup_data()

    assert report.removed == {PAYROLL_KEY: 1, ATTENDANCE_KEY: 1}
    assert load(store, TRANSACTIONS_KEY) == [{"id": "t1", "amount": -5}]
    assert load(store, PAYROLL_KEY) == []
    assert load(store, ATTENDANCE_KEY) == []
    assert "Failed to fix negative amounts" in caplog.text
