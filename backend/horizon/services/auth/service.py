# horizon/services/auth/service.py
from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from horizon.models.user import User
from horizon.repositories.user import UserRepository
from horizon.services._shared.base import BaseService, ServiceContext
from horizon.services._shared.errors import (
    ConflictError,
    InvalidArgumentError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    violates,
)
from horizon.services._shared.ports import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    RefreshTokenStore,
    RotationResult,
    TokenProvider,
)
from horizon.services.users._converters import user_to_out
from horizon.services.users.dto import UserOut

from .dto import AuthTokenConfig, LoginIn, RefreshIn, RegisterIn, TokenPairOut
from .provider import parse_subject

logger = logging.getLogger(__name__)


class LocalAuthProvider(BaseService):
    """
    Local identity backend: registration, login, refresh and verification.

    Tokens are issued and decoded through a pluggable :class:`TokenProvider`.
    Login, refresh and verification never write to the relational store.

    Refresh rotation is stateless unless a :class:`RefreshTokenStore` is
    given. With a store, each refresh token can be exchanged once; presenting
    an already exchanged token revokes every session of its user.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore | None = None,
        token_cfg: AuthTokenConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param token_provider: Adapter for issuing/decoding JWTs.
        :param refresh_store: Optional revocation set for refresh tokens.
        :param token_cfg: Access/refresh lifetimes.
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider
        self.refresh_store = refresh_store
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> UserOut:
        """
        Create an account with a salted password hash.

        :raises ConflictError: If the username (checked first) or the email is taken.
        :raises InvalidArgumentError: If the model rejects a field (e.g. email format).
        """
        username = (dto.username or "").strip()
        email = (dto.email or "").strip().lower()

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            if repo.exists_username(username):
                raise ConflictError("User", "username already exists")
            if repo.exists_email(email):
                raise ConflictError("User", "email already exists")

            try:
                user = User(
                    username=username,
                    email=email,
                    password=dto.password,
                    display_name=(dto.display_name or "").strip() or None,
                )
            except ValueError as exc:
                raise InvalidArgumentError(str(exc)) from exc

            try:
                repo.add(user)
            except IntegrityError as exc:
                # Lost a race against a concurrent registration.
                if violates(exc, "uq_users_username") or violates(exc, "users.username"):
                    raise ConflictError("User", "username already exists") from exc
                raise ConflictError("User", "email already exists") from exc

            logger.info("User registered", extra={"user_id": user.id})
            return user_to_out(user)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Verify credentials and issue a fresh token pair.

        :raises NotFoundError: If no live user matches the username or email.
        :raises InvalidCredentialsError: If the password does not match.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_login(dto.username or "")
            if user is None:
                raise NotFoundError("User", dto.username)
            if not user.verify_password(dto.password or ""):
                logger.warning("Login failed", extra={"user_id": user.id})
                raise InvalidCredentialsError()
            user_id = user.id

        logger.info("User logged in", extra={"user_id": user_id})
        return self._issue_pair(user_id)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a valid refresh token for a new pair.

        :raises ExpiredTokenError: If the refresh token has expired.
        :raises InvalidTokenError: On bad signature/algorithm/type/subject, or
            when the revocation set rejects the token.
        :raises NotFoundError: If the user no longer exists.
        """
        claims = self.tokens.decode(dto.refresh_token)
        if claims.get("type") != REFRESH_TOKEN_TYPE:
            raise InvalidTokenError("Wrong token type: refresh token required.")
        user_id = parse_subject(claims)

        with self.ro_uow() as uow:
            if uow.users.get_live(user_id) is None:
                raise NotFoundError("User", user_id)

        if self.refresh_store is None:
            return self._issue_pair(user_id)

        now = datetime.now(UTC)
        new_jti = self.refresh_store.new_jti()
        result = self.refresh_store.rotate(
            old_jti=str(claims.get("jti", "")),
            new_jti=new_jti,
            now=now,
            new_expires_at=now + self.cfg.refresh_expires,
        )
        if result is RotationResult.REUSED:
            revoked = self.refresh_store.revoke_all_for_user(user_id.hex)
            logger.warning(
                "Refresh token reuse detected", extra={"user_id": user_id, "revoked": revoked}
            )
            raise InvalidTokenError("Refresh token reuse detected. Please sign in again.")
        if result is not RotationResult.OK:
            raise InvalidTokenError("Refresh token is no longer valid. Please sign in.")

        return self._tokens_for(user_id, refresh_jti=new_jti)

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def verify_token(self, token: str) -> uuid.UUID:
        """
        Verify an access token and return its user id. Pure: no store access.

        :raises ExpiredTokenError: If expired beyond the leeway.
        :raises InvalidTokenError: On any other failure, including a refresh
            token presented as an access token.
        """
        claims = self.tokens.decode(token)
        if claims.get("type") != ACCESS_TOKEN_TYPE:
            raise InvalidTokenError("Wrong token type: access token required.")
        return parse_subject(claims)

    def get_user_from_token(self, token: str) -> UserOut:
        """Verify ``token`` and load the live user it names."""
        user_id = self.verify_token(token)
        with self.ro_uow() as uow:
            user = uow.users.get_live(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user_to_out(user)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user_id: uuid.UUID) -> TokenPairOut:
        """Issue a pair, registering the refresh jti first when a store is configured."""
        refresh_jti: str | None = None
        if self.refresh_store is not None:
            refresh_jti = self.refresh_store.new_jti()
            self.refresh_store.register(
                jti=refresh_jti,
                user_id=user_id.hex,
                expires_at=datetime.now(UTC) + self.cfg.refresh_expires,
            )
        return self._tokens_for(user_id, refresh_jti=refresh_jti)

    def _tokens_for(self, user_id: uuid.UUID, *, refresh_jti: str | None) -> TokenPairOut:
        identity = user_id.hex
        access = self.tokens.create_access_token(
            identity=identity, expires_delta=self.cfg.access_expires
        )
        refresh = self.tokens.create_refresh_token(
            identity=identity, expires_delta=self.cfg.refresh_expires, jti=refresh_jti
        )
        return TokenPairOut(
            access_token=access,
            refresh_token=refresh,
            expires_in=int(self.cfg.access_expires.total_seconds()),
        )
