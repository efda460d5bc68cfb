"""Single persisted session token."""

from __future__ import annotations

import logging

from store.backends import BlobBackend
from store.errors import StoreError

logger = logging.getLogger(__name__)

AUTH_TOKEN_KEY = "auth_token"


class SessionTokenHolder:
    """Labeled read/write slot for the current auth token.

    The token is read from the backend once, at construction. Writes go to
    memory first; a failed persist is logged and the in-memory value kept.
    """

    backend: BlobBackend
    key: str

    def __init__(self, backend: BlobBackend, key: str = AUTH_TOKEN_KEY) -> None:
        self.backend = backend
        self.key = key
        self._token: str | None = self._read_persisted()

    def _read_persisted(self) -> str | None:
        try:
            raw = self.backend.get(self.key)
        except StoreError as exc:
            logger.warning(f"Could not read session token: {exc}")
            return None
        if raw is None:
            return None
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Stored session token is not valid UTF-8; ignoring it")
            return None

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        """Store a new token, or clear it with None (or an empty string)."""
        self._token = token or None
        try:
            if self._token is None:
                self.backend.delete(self.key)
            else:
                self.backend.set(self.key, self._token.encode("utf-8"))
        except StoreError as exc:
            logger.warning(f"Could not persist session token: {exc}")

    def clear(self) -> None:
        self.set_token(None)
