"""Tiny helpers shared across test modules."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt


def bearer(token: str) -> dict[str, str]:
    """Authorization header for ``token``."""
    return {"Authorization": f"Bearer {token}"}


def tokens_for(app, user) -> Any:
    """Mint a token pair for ``user`` with the app's local provider."""
    provider = app.extensions["auth_provider"]
    return provider._tokens_for(user.id, refresh_jti=None)


def forge_token(
    *,
    sub: str,
    key: str,
    algorithm: str = "HS256",
    token_type: str = "access",
    expires_in: timedelta = timedelta(minutes=5),
    **claims: Any,
) -> str:
    """Sign an arbitrary token with PyJWT, bypassing the application provider."""
    now = datetime.now(UTC)
    payload = {
        "sub": sub,
        "type": token_type,
        "iat": now,
        "nbf": now,
        "exp": now + expires_in,
        "jti": "forged",
        **claims,
    }
    return jwt.encode(payload, key, algorithm=algorithm)
