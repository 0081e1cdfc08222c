"""Identity backend for accounts managed by an external identity service."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

import jwt

from horizon.services._shared.base import BaseService, ServiceContext
from horizon.services._shared.errors import (
    ExpiredTokenError,
    InvalidTokenError,
    NotFoundError,
    UnsupportedOperationError,
)
from horizon.services.users._converters import user_to_out
from horizon.services.users.dto import UserOut

from .dto import LoginIn, RefreshIn, RegisterIn, TokenPairOut
from .provider import parse_subject

logger = logging.getLogger(__name__)


class HostedAuthProvider(BaseService):
    """
    Trust tokens minted by a hosted identity service.

    Registration, login and refresh happen through the hosted service's own
    UI/API, so those operations raise :class:`UnsupportedOperationError`.
    Verification checks signature, algorithm, expiry, issuer and audience
    with PyJWT; the ``sub`` claim is the local user id.

    :param key: Verification key (shared secret or PEM public key).
    :param algorithms: Accepted signing algorithms.
    :param issuer: Expected ``iss``; not checked when ``None``.
    :param audience: Expected ``aud``; not checked when ``None``.
    :param leeway: Clock skew tolerance in seconds.
    """

    def __init__(
        self,
        *,
        key: str,
        algorithms: Sequence[str],
        issuer: str | None = None,
        audience: str | None = None,
        leeway: int = 2,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        if not key:
            raise RuntimeError("HOSTED_AUTH_JWT_KEY must be set when hosted auth is enabled.")
        self.key = key
        self.algorithms = list(algorithms)
        self.issuer = issuer
        self.audience = audience
        self.leeway = leeway

    def register(self, dto: RegisterIn) -> UserOut:
        raise UnsupportedOperationError(
            "Registration is handled through the hosted identity provider."
        )

    def login(self, dto: LoginIn) -> TokenPairOut:
        raise UnsupportedOperationError(
            "Authentication is handled through the hosted identity provider."
        )

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        raise UnsupportedOperationError(
            "Token refresh is handled through the hosted identity provider."
        )

    def verify_token(self, token: str) -> uuid.UUID:
        """
        Validate a hosted-service token and return the local user id.

        :raises ExpiredTokenError: If expired beyond the leeway.
        :raises InvalidTokenError: On any other verification failure.
        """
        if not token:
            raise InvalidTokenError("Missing token.")
        try:
            claims = jwt.decode(
                token,
                self.key,
                algorithms=self.algorithms,
                issuer=self.issuer,
                audience=self.audience,
                leeway=self.leeway,
                options={
                    "require": ["exp", "sub"],
                    "verify_aud": self.audience is not None,
                    "verify_iss": self.issuer is not None,
                },
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except jwt.PyJWTError as exc:
            logger.info("Hosted token rejected", extra={"error": exc.__class__.__name__})
            raise InvalidTokenError() from exc
        return parse_subject(claims)

    def get_user_from_token(self, token: str) -> UserOut:
        user_id = self.verify_token(token)
        with self.ro_uow() as uow:
            user = uow.users.get_live(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user_to_out(user)
