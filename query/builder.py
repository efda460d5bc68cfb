"""Fluent builder recording a query or mutation until it is awaited."""

from __future__ import annotations

from collections.abc import Generator, Mapping
from typing import Any

from store.repository import CollectionStore

from . import engine
from .schemas import Operation, QueryIntent, QueryResult, SortSpec


class QueryBuilder:
    """Chainable query over one collection of a ``CollectionStore``.

    Every chain method swaps in a new immutable ``QueryIntent`` and returns
    the same builder. Nothing reaches the store until the builder is awaited
    (or ``execute()`` is awaited); resolving it again re-runs the same intent
    against the store's current state.

    Example::

        result = await QueryBuilder(store).from_("inventory").eq("status", "x").limit(10)
    """

    store: CollectionStore

    def __init__(self, store: CollectionStore, intent: QueryIntent | None = None) -> None:
        self.store = store
        self._intent = intent or QueryIntent()

    @property
    def intent(self) -> QueryIntent:
        return self._intent

    def _replace(self, **changes: Any) -> "QueryBuilder":
        self._intent = self._intent.model_copy(update=changes)
        return self

    def from_(self, collection: str) -> "QueryBuilder":
        self._intent = QueryIntent(collection=collection)
        return self

    def select(self, _columns: str | None = None) -> "QueryBuilder":
        # Column lists are accepted for API compatibility; whole records are returned.
        return self

    def eq(self, column: str, value: object) -> "QueryBuilder":
        filters = {**self._intent.filters, column: engine.stringify(value)}
        return self._replace(filters=filters)

    def order(self, column: str, *, ascending: bool | None = None) -> "QueryBuilder":
        return self._replace(sort=SortSpec(field=column, ascending=bool(ascending)))

    def limit(self, n: int) -> "QueryBuilder":
        return self._replace(limit=int(n))

    def offset(self, n: int) -> "QueryBuilder":
        return self._replace(offset=max(0, int(n)))

    def insert(self, record: Mapping[str, Any] | None) -> "QueryBuilder":
        payload = dict(record) if record is not None else None
        return self._replace(operation=Operation.INSERT, payload=payload)

    def update(self, changes: Mapping[str, Any] | None) -> "QueryBuilder":
        payload = dict(changes) if changes is not None else None
        return self._replace(operation=Operation.UPDATE, payload=payload)

    def delete(self) -> "QueryBuilder":
        return self._replace(operation=Operation.DELETE)

    def resolve(self) -> QueryResult:
        """Run the recorded intent synchronously."""
        return engine.execute(self._intent, self.store)

    async def execute(self) -> QueryResult:
        return self.resolve()

    def __await__(self) -> Generator[Any, None, QueryResult]:
        return self.execute().__await__()

    def __repr__(self) -> str:
        return f"QueryBuilder({self._intent!r})"
