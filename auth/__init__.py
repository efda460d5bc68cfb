"""
Auth Module

Holds the dashboard's single session token, persisted across restarts.
No validation, expiry or refresh.
"""

__version__ = "0.1.0"

from .session import AUTH_TOKEN_KEY, SessionTokenHolder

__all__ = ["AUTH_TOKEN_KEY", "SessionTokenHolder"]
