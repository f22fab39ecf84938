"""
Backup export/import of every collection in the store as one JSON document:
{"version": "1.0.0", "timestamp": "...", "data": {key: value}}
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from crewbook.core.boundary import error_boundary
from crewbook.core.storage import COLLECTION_KEYS

if TYPE_CHECKING:
    from crewbook.core.errors import ErrorHandler
    from crewbook.core.safe_storage import SafeStorage
    from crewbook.services.notification_service import NotificationSink

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0.0"


class BackupService:

    def __init__(
        self,
        storage: "SafeStorage",
        error_handler: "ErrorHandler",
        notifications: "NotificationSink",
    ):
        self.storage = storage
        self.error_handler = error_handler
        self.notifications = notifications

    def export_backup(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key in COLLECTION_KEYS:
            raw = self.storage.get_item(key)
            if raw is None:
                continue
            try:
                data[key] = json.loads(raw)
            except ValueError:
                data[key] = raw
        return {
            "version": BACKUP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": data,
        }

    def write_backup(self, path: str | Path) -> bool:
        """Writes the backup to path; failures are logged and reported to the user."""
        path = Path(path)
        try:
            path.write_text(json.dumps(self.export_backup(), indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Backup export error")
            self.notifications.error("Failed to create backup")
            return False
        self.notifications.success("Backup created")
        return True

    @error_boundary("BackupService.import_backup")
    def import_backup(self, document: dict[str, Any]) -> int:
        """Restores all known collections from a backup document; returns restored key count."""
        return self._restore(document)

    def _restore(self, document: dict[str, Any]) -> int:
        if not isinstance(document, dict) or not document.get("version") or not isinstance(document.get("data"), dict):
            raise self.error_handler.create_business_logic_error("Invalid backup format")

        restored = attempted = 0
        for key, value in document["data"].items():
            if key not in COLLECTION_KEYS:
                logger.warning("Skipping unknown backup key %s", key)
                continue
            attempted += 1
            raw = value if isinstance(value, str) else json.dumps(value)
            if self.storage.set_item(key, raw):
                restored += 1

        if attempted and not restored:
            self.notifications.error("Failed to restore backup")
        elif restored < attempted:
            self.notifications.warning(f"Backup partially restored ({restored} of {attempted} collections)")
        else:
            self.notifications.success("Backup restored")
        return restored

    @error_boundary("BackupService.read_backup")
    def read_backup(self, path: str | Path) -> int:
        try:
            document = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise self.error_handler.create_business_logic_error(
                "Failed to read backup file", {"path": str(path), "reason": str(e)}
            ) from e
        return self._restore(document)
