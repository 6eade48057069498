"""Record stores backing accounts and the waitlist.

Records are plain JSON-compatible dicts keyed by their ``"id"`` field.  The
JSON file layout is ``{"<collection>": [record, ...]}`` so existing data files
stay readable.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic.alias_generators import to_camel

from app.config import settings
from app.errors import PersistenceError

logger = logging.getLogger("novi.storage")


class RecordStore(ABC):
    """Minimal repository contract: read one, write one, read all."""

    @abstractmethod
    def get(self, record_id: str) -> dict | None: ...

    @abstractmethod
    def upsert(self, record: dict) -> None: ...

    @abstractmethod
    def list_all(self) -> list[dict]: ...

    def update(self, record_id: str, changes: dict) -> dict | None:
        """Merge *changes* into the stored record; other fields are left alone.

        A field already stored under its camelCase name keeps that name, so
        records written by older deployments stay in their own layout.
        """
        record = self.get(record_id)
        if record is None:
            return None
        for key, value in changes.items():
            camel = to_camel(key)
            record[camel if camel in record and key not in record else key] = value
        self.upsert(record)
        return record


class MemoryStore(RecordStore):
    def __init__(self, records: list[dict] | None = None) -> None:
        self._records: dict[str, dict] = {r["id"]: dict(r) for r in records or []}

    def get(self, record_id: str) -> dict | None:
        record = self._records.get(record_id)
        return dict(record) if record is not None else None

    def upsert(self, record: dict) -> None:
        self._records[record["id"]] = dict(record)

    def list_all(self) -> list[dict]:
        return [dict(r) for r in self._records.values()]


class JsonFileStore(RecordStore):
    """Whole-file read-modify-write store.  Writes replace the file atomically."""

    def __init__(self, path: str | Path, collection: str) -> None:
        self.path = Path(path)
        self.collection = collection
        self._lock = threading.Lock()

    def _read(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                parsed = json.load(fh)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to read {self.collection} data") from exc
        if isinstance(parsed, list):
            return parsed
        return parsed.get(self.collection) or []

    def _write(self, records: list[dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump({self.collection: records}, fh, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Writing %s failed: %s", self.path, exc)
            raise PersistenceError(f"Failed to save {self.collection} data") from exc

    def get(self, record_id: str) -> dict | None:
        with self._lock:
            for record in self._read():
                if record.get("id") == record_id:
                    return record
        return None

    def upsert(self, record: dict) -> None:
        with self._lock:
            records = self._read()
            for i, existing in enumerate(records):
                if existing.get("id") == record["id"]:
                    records[i] = record
                    break
            else:
                records.append(record)
            self._write(records)

    def list_all(self) -> list[dict]:
        with self._lock:
            return self._read()


def open_store(collection: str) -> RecordStore:
    """Build the configured store for *collection* (``json`` or ``memory``)."""
    backend = (settings.get("STORAGE_BACKEND") or "json").lower()
    if backend == "memory":
        return MemoryStore()
    data_dir = Path(settings.get("DATA_DIR") or "data")
    return JsonFileStore(data_dir / f"{collection}.json", collection)
