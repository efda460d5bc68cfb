"""Execution of query intents against a collection store."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from store.repository import CollectionStore, Record

from .schemas import Operation, QueryIntent, QueryResult, SortSpec

logger = logging.getLogger(__name__)


def stringify(value: object) -> str:
    """Render a field value the way filters compare it.

    Equality is textual, so 5, 5.0 and "5" all render as "5".
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def matches(record: Mapping[str, Any], filters: Mapping[str, str]) -> bool:
    """True when every filter field is present and stringifies to its value."""
    for field, expected in filters.items():
        if field not in record:
            return False
        if stringify(record[field]) != expected:
            return False
    return True


def filter_records(records: Sequence[Record], filters: Mapping[str, str]) -> list[Record]:
    return [record for record in records if matches(record, filters)]


def _sort_key(value: object) -> tuple[int, Any]:
    # numbers before text before anything else, so mixed columns never compare across kinds
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, str):
        return (1, value)
    return (2, stringify(value))


def sort_records(records: Sequence[Record], sort: SortSpec) -> list[Record]:
    """Stable sort on one field.

    Records without the field (or with null) keep their relative order and
    always come after the sorted ones, whatever the direction.
    """
    present = [r for r in records if r.get(sort.field) is not None]
    missing = [r for r in records if r.get(sort.field) is None]
    ordered = sorted(
        present,
        key=lambda record: _sort_key(record[sort.field]),
        reverse=not sort.ascending,
    )
    return ordered + missing


def paginate(records: Sequence[Record], offset: int = 0, limit: int | None = None) -> list[Record]:
    """Slice ``[offset, offset + limit)``; a negative limit counts back from the end."""
    if limit is None:
        limit = len(records)
    return list(records[offset:offset + limit])


def _read(intent: QueryIntent, records: list[Record]) -> Any:
    selected = filter_records(records, intent.filters)
    if intent.sort is not None:
        selected = sort_records(selected, intent.sort)
    return paginate(selected, intent.offset, intent.limit)


def _insert(intent: QueryIntent, records: list[Record]) -> tuple[Any, list[Record]]:
    new_record = dict(intent.payload or {})
    return new_record, [new_record, *records]


def _update(intent: QueryIntent, records: list[Record]) -> tuple[Any, list[Record]]:
    payload = intent.payload or {}
    if not intent.filters:
        logger.warning(f"Update on {intent.collection} has no filters; every record is updated")
    updated = [
        {**record, **payload} if matches(record, intent.filters) else record
        for record in records
    ]
    return dict(payload), updated


def _delete(intent: QueryIntent, records: list[Record]) -> tuple[Any, list[Record] | None]:
    if not intent.filters:
        logger.info(f"Delete on {intent.collection} has no filters; nothing removed")
        return None, None
    remaining = [record for record in records if not matches(record, intent.filters)]
    return None, remaining


def execute(intent: QueryIntent, store: CollectionStore) -> QueryResult:
    """Run an intent as one read-modify-write against the store.

    Reads never write back. A delete without filters never writes either.
    Store failures go through ``store.resolve_error``; with the default
    policy the envelope's ``error`` is always None.
    """
    loaded = store.read(intent.collection)
    error = store.resolve_error(loaded)
    records = loaded.value

    operation = intent.operation
    if operation in (Operation.INSERT, Operation.UPDATE) and intent.payload is None:
        operation = Operation.READ

    if operation is Operation.READ:
        return QueryResult(payload=_read(intent, records), error=error)

    if operation is Operation.INSERT:
        payload, new_records = _insert(intent, records)
    elif operation is Operation.UPDATE:
        payload, new_records = _update(intent, records)
    else:
        payload, new_records = _delete(intent, records)

    if new_records is not None:
        write_error = store.resolve_error(store.write(intent.collection, new_records))
        error = error or write_error
    return QueryResult(payload=payload, error=error)
