"""Key-value blob backends underneath the collection store."""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import cast

from .database import connect, initialize_database
from .errors import PersistError, QuotaExceededError, StoreClosedError, StoreError


class BlobBackend(ABC):
    """Abstract byte store addressed by text keys."""

    @abstractmethod
    def open(self) -> None:
        """Acquire underlying resources. Calling it twice is harmless."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources. Calling it twice is harmless."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the backend accepts reads and writes."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Replace the bytes stored under key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]:
        """Return stored keys starting with prefix, sorted."""

    def _require_open(self, key: str | None = None) -> None:
        if not self.is_open:
            raise StoreClosedError(f"{self.__class__.__name__} is not open", key=key)


class MemoryBackend(BlobBackend):
    """Process-local backend, optionally capped like browser storage."""

    quota_bytes: int | None

    def __init__(self, quota_bytes: int | None = None) -> None:
        self.quota_bytes = quota_bytes
        self._data: dict[str, bytes] = {}
        self._open = False

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def get(self, key: str) -> bytes | None:
        self._require_open(key)
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._require_open(key)
        if self.quota_bytes is not None:
            used = sum(
                len(k.encode("utf-8")) + len(v) for k, v in self._data.items() if k != key
            )
            needed = len(key.encode("utf-8")) + len(value)
            if used + needed > self.quota_bytes:
                raise QuotaExceededError(
                    f"Writing {needed} bytes would exceed quota of {self.quota_bytes}",
                    key=key,
                )
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._require_open(key)
        _ = self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        self._require_open()
        return sorted(key for key in self._data if key.startswith(prefix))


class SQLiteBackend(BlobBackend):
    """Durable backend keeping every key in a single SQLite table."""

    db_path: str

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        self._connection: sqlite3.Connection | None = None

    def open(self) -> None:
        if self._connection is not None:
            return
        try:
            initialize_database(self.db_path)
            self._connection = connect(self.db_path)
        except (sqlite3.Error, OSError) as exc:
            raise StoreError(f"Cannot open database {self.db_path}: {exc}") from exc

    def close(self) -> None:
        if self._connection is None:
            return
        self._connection.close()
        self._connection = None

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def _conn(self, key: str | None = None) -> sqlite3.Connection:
        self._require_open(key)
        return cast(sqlite3.Connection, self._connection)

    def get(self, key: str) -> bytes | None:
        connection = self._conn(key)
        try:
            row = cast(
                sqlite3.Row | None,
                connection.execute("SELECT value FROM blobs WHERE key = ?", (key,)).fetchone(),
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot read {key}: {exc}", key=key) from exc
        if row is None:
            return None
        value = cast(object, row["value"])
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(cast(bytes, value))

    def set(self, key: str, value: bytes) -> None:
        connection = self._conn(key)
        try:
            with connection:
                _ = connection.execute(
                    """
                    INSERT INTO blobs (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, sqlite3.Binary(value)),
                )
        except sqlite3.Error as exc:
            raise PersistError(f"Cannot write {key}: {exc}", key=key) from exc

    def delete(self, key: str) -> None:
        connection = self._conn(key)
        try:
            with connection:
                _ = connection.execute("DELETE FROM blobs WHERE key = ?", (key,))
        except sqlite3.Error as exc:
            raise PersistError(f"Cannot delete {key}: {exc}", key=key) from exc

    def keys(self, prefix: str = "") -> list[str]:
        connection = self._conn()
        try:
            rows = connection.execute("SELECT key FROM blobs ORDER BY key").fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot list keys: {exc}") from exc
        names = [cast(str, cast(sqlite3.Row, row)["key"]) for row in rows]
        return [name for name in names if name.startswith(prefix)]
