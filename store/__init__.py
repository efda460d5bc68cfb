"""
Store Module

Persistent record storage for the dashboard's data layer.

This module provides:
- Blob backends (in-memory with optional quota, SQLite on disk)
- Named collections serialized as JSON arrays under a namespaced key
- Lazy per-collection snapshots
- A log/report/raise policy for load and persist failures
"""

__version__ = "0.1.0"

from .backends import BlobBackend, MemoryBackend, SQLiteBackend
from .errors import (
    DecodeError,
    PersistError,
    QuotaExceededError,
    StoreClosedError,
    StoreError,
)
from .repository import (
    DEFAULT_NAMESPACE,
    CollectionStore,
    ErrorPolicy,
    Record,
    StoreOutcome,
)

__all__ = [
    "BlobBackend",
    "CollectionStore",
    "DEFAULT_NAMESPACE",
    "DecodeError",
    "ErrorPolicy",
    "MemoryBackend",
    "PersistError",
    "QuotaExceededError",
    "Record",
    "SQLiteBackend",
    "StoreClosedError",
    "StoreError",
    "StoreOutcome",
]
