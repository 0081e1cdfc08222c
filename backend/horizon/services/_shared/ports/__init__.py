"""
horizon.services._shared.ports
==============================

Hexagonal interfaces the auth services depend on.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`, issuing and decoding signed tokens.
- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore`, :class:`~.RotationResult` and
    :class:`~.RefreshSessionView`, the optional revocation set for refresh
    tokens, plus an in-process implementation.

Concrete adapters (flask-jwt-extended, Redis) live under ``horizon.infra``.
"""

from __future__ import annotations

from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshSessionView,
    RefreshTokenStore,
    RotationResult,
)
from .token_provider import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenProvider

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "TokenProvider",
    "RefreshTokenStore",
    "RotationResult",
    "RefreshSessionView",
    "InMemoryRefreshTokenStore",
]
