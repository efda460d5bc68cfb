from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from store.errors import StoreError


TBaseSchema = TypeVar("TBaseSchema", bound="BaseSchema")


class BaseSchema(BaseModel):
    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()

    @classmethod
    def from_json(cls: type[TBaseSchema], data: str) -> TBaseSchema:
        return cls.model_validate_json(data)

    @classmethod
    def from_dict(cls: type[TBaseSchema], data: Mapping[str, object]) -> TBaseSchema:
        return cls.model_validate(data)


class Operation(str, Enum):
    READ = "read"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class SortSpec(BaseSchema):
    model_config = ConfigDict(frozen=True)

    field: str
    ascending: bool = False


class QueryIntent(BaseSchema):
    """Everything a builder has recorded, before it touches the store.

    ``filters`` maps a field name to the stringified value it must equal.
    ``limit`` and ``offset`` only matter for reads.
    """

    model_config = ConfigDict(frozen=True)

    collection: str = ""
    filters: dict[str, str] = Field(default_factory=dict)
    sort: SortSpec | None = None
    limit: int | None = None
    offset: int = Field(default=0, ge=0)
    operation: Operation = Operation.READ
    payload: dict[str, Any] | None = None


class QueryResult(BaseSchema):
    """Envelope handed back on resolution."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    payload: Any = None
    error: StoreError | None = None

    @field_serializer("error")
    def serialize_error(self, error: StoreError | None) -> str | None:
        return str(error) if error is not None else None

    @property
    def data(self) -> Any:
        return self.payload
