"""Persistence for the inspection record collection."""

from __future__ import annotations

import datetime
import json
import logging
from pathlib import Path
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

STORAGE_KEY = "turnaroundItems"
DEFAULT_STORE_PATH = "data/turnaround_store"

PROTECTED_FIELDS = ("id", "timestamp")

SAVE_FAILED_MESSAGE = "Error adding/updating item. Please try again."
DELETE_FAILED_MESSAGE = "Error deleting item. Please try again."


class RecordNotFoundError(KeyError):
    """Raised when an update or delete names an identity that is not stored."""

    def __init__(self, record_id: Any) -> None:
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"Item {self.record_id} not found."


class KeyValueBackend(Protocol):
    def load(self, key: str) -> str | None: ...

    def save(self, key: str, text: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed slots for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.slots: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self.slots.get(key)

    def save(self, key: str, text: str) -> None:
        self.slots[key] = text


class FileKeyValueStore:
    """One UTF-8 JSON text file per key inside a folder."""

    def __init__(self, folder: str | Path = DEFAULT_STORE_PATH) -> None:
        self.folder = Path(folder).expanduser()

    def path_for(self, key: str) -> Path:
        return self.folder / f"{key}.json"

    def load(self, key: str) -> str | None:
        target = self.path_for(key)
        if not target.exists():
            return None
        return target.read_text(encoding="utf-8")

    def save(self, key: str, text: str) -> None:
        target = self.path_for(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        staging = target.with_suffix(".json.tmp")
        staging.write_text(text, encoding="utf-8")
        staging.replace(target)


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def iso_timestamp(moment: datetime.datetime) -> str:
    """UTC creation stamp shaped like "2024-01-10T08:00:00.000Z"."""
    utc = moment.astimezone(datetime.timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


class RecordStore:
    """Create, update, delete and list records; every mutation rewrites the whole slot."""

    def __init__(
        self,
        backend: KeyValueBackend,
        key: str = STORAGE_KEY,
        clock: Callable[[], datetime.datetime] = _utc_now,
    ) -> None:
        self.backend = backend
        self.key = key
        self.clock = clock
        self._last_id = 0

    def load_all(self) -> list[dict[str, Any]]:
        """Stored collection; empty when nothing is stored or the payload is unreadable."""
        try:
            raw = self.backend.load(self.key)
            if not raw:
                return []
            payload = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Stored %s payload is not valid JSON; starting empty", self.key)
            return []
        if not isinstance(payload, list):
            logger.warning("Stored %s payload is not a list; starting empty", self.key)
            return []
        return [item for item in payload if isinstance(item, dict)]

    def _persist(self, records: list[dict[str, Any]]) -> None:
        self.backend.save(self.key, json.dumps(records, indent=2, ensure_ascii=False))

    def _next_id(self, records: list[dict[str, Any]], now: datetime.datetime) -> int:
        candidate = int(now.timestamp() * 1000)
        taken = [item["id"] for item in records if isinstance(item.get("id"), int)]
        floor = max([self._last_id, *taken])
        if candidate <= floor:
            candidate = floor + 1
        self._last_id = candidate
        return candidate

    @staticmethod
    def _index_of(records: list[dict[str, Any]], record_id: Any) -> int:
        for idx, item in enumerate(records):
            if item.get("id") == record_id:
                return idx
        raise RecordNotFoundError(record_id)

    def get_record(self, record_id: Any) -> dict[str, Any]:
        records = self.load_all()
        return records[self._index_of(records, record_id)]

    def create_record(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Append a record with a fresh identity and creation timestamp."""
        records = self.load_all()
        now = self.clock()
        record = {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}
        record["id"] = self._next_id(records, now)
        record["timestamp"] = iso_timestamp(now)
        records.append(record)
        self._persist(records)
        logger.info("Created item %s", record["id"])
        return record

    def update_record(self, record_id: Any, fields: dict[str, Any]) -> dict[str, Any]:
        """Overwrite every field except identity and creation timestamp."""
        records = self.load_all()
        idx = self._index_of(records, record_id)
        current = records[idx]
        updated = {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}
        updated["id"] = current["id"]
        if "timestamp" in current:
            updated["timestamp"] = current["timestamp"]
        records[idx] = updated
        self._persist(records)
        logger.info("Updated item %s", record_id)
        return updated

    def delete_record(self, record_id: Any) -> None:
        records = self.load_all()
        idx = self._index_of(records, record_id)
        del records[idx]
        self._persist(records)
        logger.info("Deleted item %s", record_id)


def open_record_store(folder: str = DEFAULT_STORE_PATH) -> RecordStore:
    return RecordStore(FileKeyValueStore(folder))


def submit_record(store: RecordStore, editing_id: Any, fields: dict[str, Any]) -> tuple[str, bool]:
    """Create (no pending edit) or update from a form submission; returns (notice, is_error)."""
    try:
        if editing_id is None:
            store.create_record(fields)
            return "Item added successfully!", False
        store.update_record(editing_id, fields)
        return "Item updated successfully!", False
    except RecordNotFoundError:
        logger.warning("Update requested for missing item %s", editing_id)
        return "Error: Item to update not found.", True
    except OSError:
        logger.exception("Saving item failed")
        return SAVE_FAILED_MESSAGE, True


def remove_record(store: RecordStore, record_id: Any) -> tuple[str, bool]:
    try:
        store.delete_record(record_id)
    except RecordNotFoundError:
        logger.warning("Delete requested for missing item %s", record_id)
        return "Item not found for deletion.", True
    except OSError:
        logger.exception("Deleting item %s failed", record_id)
        return DELETE_FAILED_MESSAGE, True
    return "Item deleted successfully!", False
