"""
Typed application errors and the central ErrorHandler.

Every error that reaches the handler is appended to an in-process log,
mirrored into the key/value store (newest ERROR_LOG_LIMIT entries) and turned
into exactly one user notification.
"""
from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from crewbook.core.storage import ERRORS_KEY

if TYPE_CHECKING:
    from crewbook.core.storage import KeyValueStore
    from crewbook.services.notification_service import NotificationSink

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"

MSG_NETWORK = "Connection problem. Please try again."
MSG_STORAGE = "Failed to save data. Check available storage."
MSG_GENERIC = "Something went wrong. Please try again."


class ErrorCode(str, Enum):
    VALIDATION = "VALIDATION_ERROR"
    NETWORK = "NETWORK_ERROR"
    STORAGE = "STORAGE_ERROR"
    BUSINESS_LOGIC = "BUSINESS_LOGIC_ERROR"
    UNKNOWN = "UNKNOWN_ERROR"


class AppError(Exception):
    """Raisable error record: code, message, optional details, timestamp."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Any = None,
        timestamp: datetime | None = None,
    ):
        super().__init__(message)
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.message = message
        self.details = details
        self.timestamp = timestamp or datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }

    def __repr__(self) -> str:
        return f"AppError(code={self.code}, message={self.message!r})"


class ErrorHandler:

    def __init__(
        self,
        store: "KeyValueStore",
        notifications: "NotificationSink",
        limit: int = 100,
    ):
        self.store = store
        self.notifications = notifications
        self.limit = limit
        self._errors: list[AppError] = []

    # ── Logging ──────────────────────────────────────────────────────────────

    def log_error(self, error: AppError) -> None:
        self._errors.append(error)
        logger.error("Application error: %s – %s", error.code, error.message)
        self._persist(error)

    def _persist(self, error: AppError) -> None:
        # must not raise
        try:
            stored = self._read_stored(self.store.get_item(ERRORS_KEY))
            stored.append(error.to_dict())
            stored = stored[-self.limit:]
            self.store.set_item(ERRORS_KEY, json.dumps(stored, default=str))
        except Exception:
            logger.exception("Failed to store error")

    @staticmethod
    def _read_stored(raw: str | None) -> list:
        # a corrupt mirror is started over
        try:
            stored = json.loads(raw) if raw else []
        except ValueError:
            logger.warning("Stored error log is corrupt – starting a new one")
            return []
        return stored if isinstance(stored, list) else []

    def handle_error(self, error: BaseException, context: str | None = None) -> AppError:
        if isinstance(error, AppError):
            code = error.code
            message = error.message or DEFAULT_ERROR_MESSAGE
            original_details = error.details
        else:
            code = ErrorCode.UNKNOWN
            message = str(error) or DEFAULT_ERROR_MESSAGE
            original_details = None

        details: dict[str, Any] = {
            "context": context,
            "stack": "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ),
        }
        if original_details is not None:
            details["details"] = original_details

        app_error = AppError(code, message, details)
        self.log_error(app_error)
        self._notify(app_error)
        return app_error

    def _notify(self, error: AppError) -> None:
        try:
            if error.code == ErrorCode.VALIDATION:
                self.notifications.warning(error.message)
            elif error.code == ErrorCode.NETWORK:
                self.notifications.error(MSG_NETWORK)
            elif error.code == ErrorCode.STORAGE:
                self.notifications.error(MSG_STORAGE)
            else:
                self.notifications.error(MSG_GENERIC)
        except Exception:
            logger.exception("Failed to notify about error %s", error.code)

    def get_errors(self) -> list[AppError]:
        return list(self._errors)

    def clear_errors(self) -> None:
        self._errors = []
        try:
            self.store.remove_item(ERRORS_KEY)
        except Exception:
            logger.exception("Failed to clear stored errors")

    def get_stored_errors(self) -> list[dict[str, Any]]:
        """Persisted mirror of the log (survives restarts)."""
        try:
            return self._read_stored(self.store.get_item(ERRORS_KEY))
        except Exception:
            logger.exception("Failed to read stored errors")
            return []

    # ── Error constructors ───────────────────────────────────────────────────

    @staticmethod
    def create_validation_error(message: str, details: Any = None) -> AppError:
        return AppError(ErrorCode.VALIDATION, message, details)

    @staticmethod
    def create_network_error(message: str, details: Any = None) -> AppError:
        return AppError(ErrorCode.NETWORK, message, details)

    @staticmethod
    def create_storage_error(message: str, details: Any = None) -> AppError:
        return AppError(ErrorCode.STORAGE, message, details)

    @staticmethod
    def create_business_logic_error(message: str, details: Any = None) -> AppError:
        return AppError(ErrorCode.BUSINESS_LOGIC, message, details)
