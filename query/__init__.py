"""
Query Module

Fluent query/mutation builder emulating a remote table API.

This module implements:
- Immutable query intents (collection, equality filters, sort, pagination)
- A chainable builder that only records intent until awaited
- A pure execution engine for read, insert, update and delete
- A uniform {payload, error} result envelope
"""

__version__ = "0.1.0"

from .builder import QueryBuilder
from .engine import execute, stringify
from .schemas import Operation, QueryIntent, QueryResult, SortSpec

__all__ = [
    "Operation",
    "QueryBuilder",
    "QueryIntent",
    "QueryResult",
    "SortSpec",
    "execute",
    "stringify",
]
