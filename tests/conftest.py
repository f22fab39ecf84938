"""
Shared pytest fixtures for crewbook tests.

Uses SQLite in-memory with StaticPool so every session shares one connection;
each test gets a fresh store, error log and notification outbox.
"""
import json
from datetime import datetime, timezone

import pytest

from crewbook.core.database import Base, create_tables, make_engine
from crewbook.core.errors import ErrorHandler
from crewbook.core.safe_storage import SafeStorage
from crewbook.core.storage import SqlKeyValueStore
from crewbook.services.data_service import DataService
from crewbook.services.notification_service import NotificationService
from crewbook.services.record_store import RecordStore

FIXED_NOW = datetime(2025, 9, 15, 10, 0, tzinfo=timezone.utc)


# ── Store stubs ───────────────────────────────────────────────────────────────

class FailingStore:
    """Every operation fails like a full or locked store."""

    def get_item(self, key):
        raise OSError("storage unavailable")

    def set_item(self, key, value):
        raise OSError("quota exceeded")

    def remove_item(self, key):
        raise OSError("storage unavailable")

    def keys(self):
        raise OSError("storage unavailable")


class ReadOnlyKeyStore:
    """Delegates to a real store but refuses writes to the given keys."""

    def __init__(self, inner, read_only_keys):
        self.inner = inner
        self.read_only_keys = set(read_only_keys)

    def get_item(self, key):
        return self.inner.get_item(key)

    def set_item(self, key, value):
        if key in self.read_only_keys:
            raise PermissionError(f"{key} is read-only")
        self.inner.set_item(key, value)

    def remove_item(self, key):
        self.inner.remove_item(key)

    def keys(self):
        return self.inner.keys()


class UnreadableKeyStore:
    """Delegates to a real store but fails reads of the given keys.

    The first `allowed_reads` reads of each key still succeed.
    """

    def __init__(self, inner, unreadable_keys, allowed_reads=0):
        self.inner = inner
        self.unreadable_keys = set(unreadable_keys)
        self.allowed_reads = allowed_reads
        self.reads = {}

    def get_item(self, key):
        if key in self.unreadable_keys:
            self.reads[key] = self.reads.get(key, 0) + 1
            if self.reads[key] > self.allowed_reads:
                raise OSError(f"cannot read {key}")
        return self.inner.get_item(key)

    def set_item(self, key, value):
        self.inner.set_item(key, value)

    def remove_item(self, key):
        self.inner.remove_item(key)

    def keys(self):
        return self.inner.keys()


# ── Store + services ──────────────────────────────────────────────────────────

@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    create_tables(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def store(engine) -> SqlKeyValueStore:
    return SqlKeyValueStore(engine)


@pytest.fixture
def notifications() -> NotificationService:
    return NotificationService()


@pytest.fixture
def error_handler(store, notifications) -> ErrorHandler:
    return ErrorHandler(store, notifications, limit=100)


@pytest.fixture
def storage(store, error_handler) -> SafeStorage:
    return SafeStorage(store, error_handler)


@pytest.fixture
def data_service(storage, error_handler, notifications) -> DataService:
    return DataService(
        storage,
        error_handler,
        notifications,
        current_user="current-user",
        large_transaction_threshold=5_000_000,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def records(storage, error_handler) -> RecordStore:
    return RecordStore(storage, error_handler, clock=lambda: FIXED_NOW)


# ── Helper ────────────────────────────────────────────────────────────────────

def seed(store, key: str, items: list) -> None:
    store.set_item(key, json.dumps(items))


def load(store, key: str) -> list:
    raw = store.get_item(key)
    return json.loads(raw) if raw else []
