from pathlib import Path

from auth.session import AUTH_TOKEN_KEY, SessionTokenHolder
from store.backends import MemoryBackend, SQLiteBackend


def _open_memory(quota_bytes: int | None = None) -> MemoryBackend:
    backend = MemoryBackend(quota_bytes=quota_bytes)
    backend.open()
    return backend


def test_starts_empty() -> None:
    holder = SessionTokenHolder(_open_memory())
    assert holder.get_token() is None


def test_reads_persisted_token_on_construction() -> None:
    backend = _open_memory()
    backend.set(AUTH_TOKEN_KEY, b"tok-123")
    assert SessionTokenHolder(backend).get_token() == "tok-123"


def test_set_and_clear_update_memory_and_backend() -> None:
    backend = _open_memory()
    holder = SessionTokenHolder(backend)

    holder.set_token("tok-abc")
    assert holder.get_token() == "tok-abc"
    assert backend.get(AUTH_TOKEN_KEY) == b"tok-abc"

    holder.set_token(None)
    assert holder.get_token() is None
    assert backend.get(AUTH_TOKEN_KEY) is None


def test_empty_string_clears() -> None:
    backend = _open_memory()
    holder = SessionTokenHolder(backend)
    holder.set_token("tok")
    holder.set_token("")
    assert holder.get_token() is None
    assert backend.keys() == []


def test_token_survives_restart(tmp_path: Path) -> None:
    db_path = tmp_path / "store.db"
    backend = SQLiteBackend(db_path)
    backend.open()
    SessionTokenHolder(backend).set_token("persisted")
    backend.close()

    reopened = SQLiteBackend(db_path)
    reopened.open()
    try:
        assert SessionTokenHolder(reopened).get_token() == "persisted"
    finally:
        reopened.close()


def test_persist_failure_keeps_in_memory_token() -> None:
    holder = SessionTokenHolder(_open_memory(quota_bytes=4))
    holder.set_token("a-token-too-large-for-quota")
    assert holder.get_token() == "a-token-too-large-for-quota"


def test_unreadable_backend_starts_without_token() -> None:
    closed = MemoryBackend()
    holder = SessionTokenHolder(closed)
    assert holder.get_token() is None


def test_clear_removes_token() -> None:
    backend = _open_memory()
    holder = SessionTokenHolder(backend)
    holder.set_token("tok")
    holder.clear()
    assert holder.get_token() is None
    assert backend.get(AUTH_TOKEN_KEY) is None
