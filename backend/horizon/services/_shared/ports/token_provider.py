from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenProvider(Protocol):
    """Port for issuing and decoding signed tokens.

    ``decode`` verifies signature, algorithm and expiry and raises
    :class:`~horizon.services._shared.errors.InvalidTokenError` or
    :class:`~horizon.services._shared.errors.ExpiredTokenError`.
    """

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def create_refresh_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
        jti: str | None = None,
    ) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...

    def get_expires_at(self, claims: dict[str, Any]) -> datetime: ...
