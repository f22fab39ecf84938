"""
Composition root: builds one instance of every service with its
dependencies. Each Container is independent (own store, error log, outbox).
"""
import logging
from dataclasses import dataclass

from sqlalchemy import Engine

from crewbook.core.config import Settings, settings as default_settings
from crewbook.core.database import create_tables, make_engine
from crewbook.core.errors import ErrorHandler
from crewbook.core.safe_storage import SafeStorage
from crewbook.core.storage import SqlKeyValueStore
from crewbook.services.backup_service import BackupService
from crewbook.services.dashboard_service import DashboardService
from crewbook.services.data_service import DataService
from crewbook.services.notification_service import NotificationService
from crewbook.services.qr_service import QRService
from crewbook.services.record_store import RecordStore


@dataclass
class Container:
    settings: Settings
    engine: Engine
    notifications: NotificationService
    error_handler: ErrorHandler
    storage: SafeStorage
    data_service: DataService
    records: RecordStore
    qr: QRService
    backup: BackupService
    dashboard: DashboardService


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def build_container(app_settings: Settings | None = None, engine: Engine | None = None) -> Container:
    cfg = app_settings or default_settings
    if engine is None:
        engine = make_engine(cfg.STORAGE_URL, echo=False)
    create_tables(engine)

    store = SqlKeyValueStore(engine)
    notifications = NotificationService()
    error_handler = ErrorHandler(store, notifications, limit=cfg.ERROR_LOG_LIMIT)
    storage = SafeStorage(store, error_handler)
    records = RecordStore(storage, error_handler)

    return Container(
        settings=cfg,
        engine=engine,
        notifications=notifications,
        error_handler=error_handler,
        storage=storage,
        data_service=DataService(
            storage,
            error_handler,
            notifications,
            current_user=cfg.CURRENT_USER,
            large_transaction_threshold=cfg.LARGE_TRANSACTION_THRESHOLD,
        ),
        records=records,
        qr=QRService(validity_hours=cfg.QR_VALIDITY_HOURS),
        backup=BackupService(storage, error_handler, notifications),
        dashboard=DashboardService(records),
    )
