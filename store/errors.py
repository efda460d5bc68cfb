"""Error types raised or reported by the persistent store."""

from __future__ import annotations


class StoreError(IOError):
    """Base class for persistent store failures."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class DecodeError(StoreError):
    """Stored bytes for a collection are not a serialized record list."""


class PersistError(StoreError):
    """Writing a collection back to the backend failed."""


class QuotaExceededError(PersistError):
    """The backend refused a write because its size limit was reached."""


class StoreClosedError(StoreError):
    """The store was used before open() or after close()."""
