"""
Notification sink – user-facing messages by level.

Rendering is up to the front end; this service only records notices in an
outbox (newest last) and writes them to the application log.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from crewbook.utils.calculations import format_currency

logger = logging.getLogger(__name__)

LEVEL_SUCCESS = "success"
LEVEL_WARNING = "warning"
LEVEL_ERROR   = "error"
LEVEL_INFO    = "info"

EVENT_GENERAL           = "general"
EVENT_LARGE_TRANSACTION = "large_transaction"

_LOG_LEVELS = {
    LEVEL_SUCCESS: logging.INFO,
    LEVEL_INFO:    logging.INFO,
    LEVEL_WARNING: logging.WARNING,
    LEVEL_ERROR:   logging.ERROR,
}


class NotificationSink(Protocol):
    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def alert_large_transaction(self, amount: float, type: str) -> None: ...


@dataclass
class Notification:
    level: str
    message: str
    event_type: str = EVENT_GENERAL
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationService:

    def __init__(self):
        self.outbox: list[Notification] = []

    def dispatch(self, level: str, message: str, event_type: str = EVENT_GENERAL) -> Notification:
        notice = Notification(level=level, message=message, event_type=event_type)
        self.outbox.append(notice)
        logger.log(_LOG_LEVELS.get(level, logging.INFO), "[%s] %s", level, message)
        return notice

    def success(self, message: str) -> None:
        self.dispatch(LEVEL_SUCCESS, message)

    def warning(self, message: str) -> None:
        self.dispatch(LEVEL_WARNING, message)

    def error(self, message: str) -> None:
        self.dispatch(LEVEL_ERROR, message)

    def info(self, message: str) -> None:
        self.dispatch(LEVEL_INFO, message)

    def alert_large_transaction(self, amount: float, type: str) -> None:
        """Always alerts; callers decide what counts as large."""
        if type == "income":
            msg = f"Large income recorded: {format_currency(amount)}"
        else:
            msg = f"Large expense recorded: {format_currency(amount)}"
        self.dispatch(LEVEL_INFO, msg, EVENT_LARGE_TRANSACTION)

    def by_level(self, level: str) -> list[Notification]:
        return [n for n in self.outbox if n.level == level]

    def clear(self) -> None:
        self.outbox = []
