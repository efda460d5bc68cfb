"""Dashboard-facing client combining the collection store and session token."""

from __future__ import annotations

import logging

from auth.session import AUTH_TOKEN_KEY, SessionTokenHolder
from query.builder import QueryBuilder
from store.backends import BlobBackend, MemoryBackend, SQLiteBackend
from store.repository import CollectionStore

from .config import ClientConfig

logger = logging.getLogger(__name__)

KNOWN_COLLECTIONS = (
    "warehouses",
    "inventory",
    "vehicles",
    "material_requests",
    "users",
    "movements",
    "purchase_orders",
)


class ApiClient:
    """Entry point used by the dashboard: ``await client.from_("vehicles").eq(...)``.

    Opens its store on construction and reads the persisted token at the same
    time, so the token is available immediately.
    """

    store: CollectionStore
    tokens: SessionTokenHolder

    def __init__(self, store: CollectionStore, token_key: str = AUTH_TOKEN_KEY) -> None:
        self.store = store
        if not self.store.is_open:
            _ = self.store.open()
        self.tokens = SessionTokenHolder(store.backend, key=token_key)

    def from_(self, collection: str) -> QueryBuilder:
        return QueryBuilder(self.store).from_(collection)

    def get_token(self) -> str | None:
        return self.tokens.get_token()

    def set_token(self, token: str | None) -> None:
        self.tokens.set_token(token)

    def clear_token(self) -> None:
        self.tokens.clear()

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()


def build_backend(config: ClientConfig) -> BlobBackend:
    if config.backend == "memory":
        return MemoryBackend(quota_bytes=config.quota_bytes)
    return SQLiteBackend(config.db_path)


def create_client(config: ClientConfig | None = None) -> ApiClient:
    """Build and open a client from configuration (defaults when omitted)."""
    config = config or ClientConfig()
    store = CollectionStore(
        build_backend(config),
        namespace=config.namespace,
        policy=config.error_policy,
    )
    logger.debug(f"Opening {config.backend} store (namespace={config.namespace})")
    return ApiClient(store, token_key=config.token_key)


_default_client: ApiClient | None = None


def get_client(config: ClientConfig | None = None) -> ApiClient:
    """Return the process-wide client, creating it on first use.

    ``config`` is only consulted when the client does not exist yet.
    """
    global _default_client
    if _default_client is None or not _default_client.store.is_open:
        _default_client = create_client(config)
    return _default_client


def reset_client() -> None:
    """Close and forget the process-wide client."""
    global _default_client
    if _default_client is not None:
        _default_client.close()
    _default_client = None
