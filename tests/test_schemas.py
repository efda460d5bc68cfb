import json

import pytest
from pydantic import ValidationError

from query.schemas import Operation, QueryIntent, QueryResult, SortSpec
from store.errors import PersistError


def test_intent_serialize_round_trip() -> None:
    intent = QueryIntent(
        collection="inventory",
        filters={"status": "disponivel"},
        sort=SortSpec(field="quantity", ascending=True),
        limit=10,
        offset=20,
        operation=Operation.UPDATE,
        payload={"quantity": 5, "tags": ["a"]},
    )

    restored = QueryIntent.from_json(intent.to_json())

    assert restored == intent
    assert restored.operation is Operation.UPDATE


def test_intent_load_from_dict() -> None:
    intent = QueryIntent.from_dict({"collection": "users", "operation": "delete", "filters": {"id": "oper"}})
    assert intent.operation is Operation.DELETE
    assert intent.limit is None
    assert intent.offset == 0


def test_intent_is_frozen() -> None:
    intent = QueryIntent(collection="users")
    with pytest.raises(ValidationError):
        intent.collection = "vehicles"


def test_intent_offset_validation() -> None:
    with pytest.raises(ValidationError):
        _ = QueryIntent(collection="users", offset=-1)


def test_result_envelope_carries_error() -> None:
    error = PersistError("quota", key="logiwms_users")
    result = QueryResult(payload={"id": "admin"}, error=error)
    assert result.data == {"id": "admin"}
    assert result.error is error
    assert QueryResult().payload is None


def test_result_envelope_serializes_error_as_text() -> None:
    result = QueryResult(payload=None, error=PersistError("quota exceeded", key="logiwms_users"))
    assert json.loads(result.to_json()) == {"payload": None, "error": "quota exceeded"}
    assert QueryResult(payload=[{"id": 1}]).to_dict() == {"payload": [{"id": 1}], "error": None}
