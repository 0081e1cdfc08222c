"""
Auth gate contract and provider selection.

Two identity backends implement :class:`AuthProvider`:

- :class:`~horizon.services.auth.service.LocalAuthProvider` signs and
  verifies its own HS256 tokens against the local user table.
- :class:`~horizon.services.auth.hosted.HostedAuthProvider` trusts tokens
  minted by an external identity service.

The variant is chosen once, when the application starts, and stored in
``app.extensions["auth_provider"]``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Protocol

from flask import Flask

from horizon.services._shared.errors import InvalidTokenError
from horizon.services.users.dto import UserOut

from .dto import LoginIn, RefreshIn, RegisterIn, TokenPairOut

logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    """Capability interface shared by every identity backend."""

    def register(self, dto: RegisterIn) -> UserOut: ...

    def login(self, dto: LoginIn) -> TokenPairOut: ...

    def refresh(self, dto: RefreshIn) -> TokenPairOut: ...

    def verify_token(self, token: str) -> uuid.UUID: ...

    def get_user_from_token(self, token: str) -> UserOut: ...


def parse_subject(claims: dict[str, Any]) -> uuid.UUID:
    """
    Extract the user id from the ``sub`` claim.

    :raises InvalidTokenError: If the subject is missing, empty or not a UUID.
    """
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise InvalidTokenError("Token subject is missing.")
    try:
        return uuid.UUID(subject)
    except ValueError as exc:
        raise InvalidTokenError("Token subject is malformed.") from exc


def build_auth_provider(app: Flask) -> AuthProvider:
    """
    Select and build the identity backend from the app config.

    ``HostedAuthProvider`` is used only when ``APP_ENV`` is ``production``
    and ``HOSTED_AUTH_ENABLED`` is set; every other combination gets the
    local provider. With ``AUTH_REFRESH_STORE`` set to ``memory`` or
    ``redis`` the local provider tracks refresh tokens for rotation and
    reuse detection.

    :param app: Application whose config drives the choice.
    :type app: flask.Flask
    :returns: Ready-to-use provider.
    :rtype: AuthProvider
    """
    from horizon.core.extensions import get_redis
    from horizon.infra.jwt.token_provider import JWTTokenProvider
    from horizon.infra.redis.refresh_token_store import RedisRefreshTokenStore
    from horizon.services._shared.ports import InMemoryRefreshTokenStore, RefreshTokenStore

    from .dto import AuthTokenConfig
    from .hosted import HostedAuthProvider
    from .service import LocalAuthProvider

    cfg = app.config
    if cfg.get("APP_ENV") == "production" and cfg.get("HOSTED_AUTH_ENABLED"):
        logger.info("Auth provider selected", extra={"provider": "hosted"})
        return HostedAuthProvider(
            key=cfg["HOSTED_AUTH_JWT_KEY"],
            algorithms=list(cfg.get("HOSTED_AUTH_ALGORITHMS") or ["RS256"]),
            issuer=cfg.get("HOSTED_AUTH_ISSUER"),
            audience=cfg.get("HOSTED_AUTH_AUDIENCE"),
            leeway=int(cfg.get("JWT_DECODE_LEEWAY", 2)),
        )

    store_kind = cfg.get("AUTH_REFRESH_STORE", "none")
    refresh_store: RefreshTokenStore | None = None
    if store_kind == "memory":
        refresh_store = InMemoryRefreshTokenStore()
    elif store_kind == "redis":
        refresh_store = RedisRefreshTokenStore(r=get_redis())
    elif store_kind != "none":
        raise RuntimeError(f"Unknown AUTH_REFRESH_STORE {store_kind!r}")

    logger.info("Auth provider selected", extra={"provider": "local", "refresh_store": store_kind})
    return LocalAuthProvider(
        token_provider=JWTTokenProvider(),
        refresh_store=refresh_store,
        token_cfg=AuthTokenConfig(
            access_expires=cfg["JWT_ACCESS_TOKEN_EXPIRES"],
            refresh_expires=cfg["JWT_REFRESH_TOKEN_EXPIRES"],
        ),
    )
