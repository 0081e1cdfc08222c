# horizon/infra/jwt/token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

import jwt
from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException

from horizon.services._shared.errors import ExpiredTokenError, InvalidTokenError
from horizon.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Signing key, algorithm, lifetimes and decode leeway come from the app
    config (``JWT_SECRET_KEY``, ``JWT_ALGORITHM``, ``JWT_DECODE_LEEWAY``...).
    Decoding only accepts the configured algorithm, so a token signed with
    any other algorithm (including ``none``) is rejected.

    .. note::
       Requires an active Flask app context.
    """

    def create_access_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        return cast(
            str,
            create_access_token(
                identity=identity,
                additional_claims=additional_claims,
                expires_delta=expires_delta,
            ),
        )

    def create_refresh_token(
        self,
        *,
        identity: str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
        jti: str | None = None,
    ) -> str:
        claims = dict(additional_claims or {})
        if jti is not None:
            # The store owns the refresh jti; the claim overrides the generated one.
            claims["jti"] = jti

        token = cast(
            str,
            create_refresh_token(
                identity=identity,
                additional_claims=claims,
                expires_delta=expires_delta,
            ),
        )

        if jti is not None and self.decode(token)["jti"] != jti:
            raise RuntimeError("Refresh token jti mismatch after creation.")
        return token

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify and decode ``token``.

        :raises ExpiredTokenError: If ``exp`` is past beyond the leeway.
        :raises InvalidTokenError: For any other verification failure.
        """
        if not token:
            raise InvalidTokenError("Missing token.")
        try:
            return cast(dict[str, Any], decode_token(token))
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except (jwt.PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError() from exc

    def get_expires_at(self, claims: dict[str, Any]) -> datetime:
        return datetime.fromtimestamp(int(claims["exp"]), tz=UTC)
