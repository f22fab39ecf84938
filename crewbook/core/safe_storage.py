"""
Fault-tolerant access to the key/value store.

Store failures are reported to the ErrorHandler as storage errors and turned
into neutral return values (None for reads, False for writes). Apart from
read_item nothing here raises.
"""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from crewbook.core.errors import ErrorHandler
    from crewbook.core.storage import KeyValueStore

logger = logging.getLogger(__name__)


class SafeStorage:

    def __init__(self, store: "KeyValueStore", error_handler: "ErrorHandler"):
        self.store = store
        self.error_handler = error_handler

    def _report(self, message: str, context: str, error: Exception) -> None:
        logger.warning("%s (%s)", message, error)
        self.error_handler.handle_error(
            self.error_handler.create_storage_error(message, {"reason": str(error)}),
            context,
        )

    def get_item(self, key: str) -> str | None:
        try:
            return self.store.get_item(key)
        except Exception as e:
            self._report(f"Failed to get item: {key}", "storage.get_item", e)
            return None

    def read_item(self, key: str) -> str | None:
        """Like get_item, but store failures propagate unreported.

        For callers that must not mistake a failed read for a missing key.
        """
        return self.store.get_item(key)

    def set_item(self, key: str, value: str) -> bool:
        try:
            self.store.set_item(key, value)
            return True
        except Exception as e:
            self._report(f"Failed to set item: {key}", "storage.set_item", e)
            return False

    def remove_item(self, key: str) -> bool:
        try:
            self.store.remove_item(key)
            return True
        except Exception as e:
            self._report(f"Failed to remove item: {key}", "storage.remove_item", e)
            return False

    def keys(self) -> list[str]:
        try:
            return self.store.keys()
        except Exception as e:
            self._report("Failed to list keys", "storage.keys", e)
            return []

    # ── JSON helpers ─────────────────────────────────────────────────────────

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            self._report(f"Error reading stored key: {key}", "storage.get_json", e)
            return default

    def set_json(self, key: str, value: Any) -> bool:
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            self._report(f"Error serializing key: {key}", "storage.set_json", e)
            return False
        return self.set_item(key, raw)
