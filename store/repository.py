"""
Collection store: named record lists serialized into a blob backend.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeAlias, TypeVar, cast

from .backends import BlobBackend
from .errors import DecodeError, PersistError, StoreError

logger = logging.getLogger(__name__)

Record: TypeAlias = dict[str, Any]

T = TypeVar("T")

DEFAULT_NAMESPACE = "logiwms_"


class ErrorPolicy(str, Enum):
    """What the store does with a failure once it has been logged."""

    LOG = "log"
    REPORT = "report"
    RAISE = "raise"


@dataclass(frozen=True)
class StoreOutcome(Generic[T]):
    value: T
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def encode_records(records: Sequence[Mapping[str, Any]]) -> bytes:
    """Serialize records as a JSON array."""
    payload = [dict(record) for record in records]
    return json.dumps(payload, ensure_ascii=False, default=str).encode("utf-8")


def decode_records(raw: bytes, key: str | None = None) -> list[Record]:
    """Parse a JSON array of objects, raising DecodeError on anything else."""
    try:
        data = cast(object, json.loads(raw.decode("utf-8")))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"Stored value is not valid JSON: {exc}", key=key) from exc
    if not isinstance(data, list):
        raise DecodeError("Stored value is not a list of records", key=key)
    records: list[Record] = []
    for item in cast(list[object], data):
        if not isinstance(item, dict):
            raise DecodeError("Stored list contains a non-record entry", key=key)
        records.append(cast(Record, item))
    return records


class CollectionStore:
    """Named collections of schema-less records over a blob backend.

    Each collection lives under ``namespace + name`` as one JSON array and is
    always rewritten whole. A collection is loaded lazily on first access and
    kept as a snapshot; a successful save replaces the snapshot, a failed one
    leaves it as it was so reads reflect what actually persisted.

    Failures never escape ``read``/``write``; ``load``/``save``/``clear`` pass
    them through ``resolve_error`` which logs and then applies ``policy``.
    """

    backend: BlobBackend
    namespace: str
    policy: ErrorPolicy

    def __init__(
        self,
        backend: BlobBackend,
        namespace: str = DEFAULT_NAMESPACE,
        policy: ErrorPolicy | str = ErrorPolicy.LOG,
    ) -> None:
        self.backend = backend
        self.namespace = namespace
        self.policy = ErrorPolicy(policy)
        self._snapshots: dict[str, list[Record]] = {}

    def open(self) -> "CollectionStore":
        self.backend.open()
        return self

    def close(self) -> None:
        self._snapshots.clear()
        self.backend.close()

    @property
    def is_open(self) -> bool:
        return self.backend.is_open

    def __enter__(self) -> "CollectionStore":
        return self.open()

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def key_for(self, collection: str) -> str:
        return f"{self.namespace}{collection}"

    def read(self, collection: str) -> StoreOutcome[list[Record]]:
        cached = self._snapshots.get(collection)
        if cached is not None:
            return StoreOutcome(copy.deepcopy(cached))
        key = self.key_for(collection)
        try:
            raw = self.backend.get(key)
            records = decode_records(raw, key=key) if raw is not None else []
        except StoreError as exc:
            return StoreOutcome([], exc)
        self._snapshots[collection] = records
        return StoreOutcome(copy.deepcopy(records))

    def write(self, collection: str, records: Sequence[Mapping[str, Any]]) -> StoreOutcome[None]:
        key = self.key_for(collection)
        try:
            raw = encode_records(records)
        except (TypeError, ValueError) as exc:
            return StoreOutcome(None, PersistError(f"Cannot serialize {collection}: {exc}", key=key))
        try:
            self.backend.set(key, raw)
        except StoreError as exc:
            return StoreOutcome(None, exc)
        self._snapshots[collection] = decode_records(raw, key=key)
        return StoreOutcome(None)

    def resolve_error(self, outcome: StoreOutcome[Any]) -> StoreError | None:
        """Log a failed outcome and apply the policy.

        Returns the error only under ``ErrorPolicy.REPORT``; raises it under
        ``ErrorPolicy.RAISE``.
        """
        if outcome.ok:
            return None
        error = cast(StoreError, outcome.error)
        logger.warning(f"Store operation on {error.key or self.namespace} failed: {error}")
        if self.policy is ErrorPolicy.RAISE:
            raise error
        if self.policy is ErrorPolicy.REPORT:
            return error
        return None

    def load(self, collection: str) -> list[Record]:
        outcome = self.read(collection)
        _ = self.resolve_error(outcome)
        return outcome.value

    def save(self, collection: str, records: Sequence[Mapping[str, Any]]) -> None:
        _ = self.resolve_error(self.write(collection, records))

    def clear(self, collection: str) -> None:
        """Drop a collection entirely; it reappears on the next write."""
        key = self.key_for(collection)
        try:
            self.backend.delete(key)
        except StoreError as exc:
            _ = self.resolve_error(StoreOutcome(None, exc))
            return
        _ = self._snapshots.pop(collection, None)

    def collections(self) -> list[str]:
        """Names of collections that currently have a persisted value."""
        try:
            keys = self.backend.keys(self.namespace)
        except StoreError as exc:
            _ = self.resolve_error(StoreOutcome(None, exc))
            return []
        return [key[len(self.namespace):] for key in keys]

    def refresh(self, collection: str | None = None) -> None:
        """Forget cached snapshots so the next read hits the backend."""
        if collection is None:
            self._snapshots.clear()
        else:
            _ = self._snapshots.pop(collection, None)
