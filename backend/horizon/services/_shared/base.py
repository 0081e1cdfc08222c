# horizon/services/_shared/base.py
from __future__ import annotations

import uuid
from dataclasses import dataclass

from flask import current_app, has_app_context

from horizon.core import errors as api_errors
from horizon.repositories.base import Pagination
from horizon.services._shared.errors import (
    AuthenticationRequiredError,
    AuthorizationError,
    ConflictError,
    InternalError,
    InvalidArgumentError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
    UnsupportedOperationError,
)
from horizon.services._shared.policies.common import is_owner
from horizon.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    Caller identity is *not* part of the context: every operation receives
    it as an explicit argument.

    :param request_id: Correlation id for logging/tracing.
    :param timeout_ms: Statement timeout for units of work opened by the
        service; falls back to ``DB_STATEMENT_TIMEOUT_MS``.
    """

    request_id: str | None = None
    timeout_ms: int | None = None


def _config_int(key: str, default: int) -> int:
    if not has_app_context():
        return default
    return int(current_app.config.get(key, default))


def ensure_pagination(limit: int | None = None, offset: int | None = None) -> Pagination:
    """
    Clamp raw pagination input into a :class:`Pagination` window.

    ``limit`` falls back to the default (10) when missing or ``<= 0`` and is
    capped at the maximum (50). ``offset`` is clamped to ``>= 0``. Both bounds
    come from ``PAGINATION_DEFAULT_LIMIT`` / ``PAGINATION_MAX_LIMIT`` when an
    application context is available.

    :param limit: Requested page size.
    :type limit: int | None
    :param offset: Requested number of rows to skip.
    :type offset: int | None
    :returns: Pagination value object.
    :rtype: Pagination
    """
    default_limit = _config_int("PAGINATION_DEFAULT_LIMIT", DEFAULT_LIMIT)
    max_limit = _config_int("PAGINATION_MAX_LIMIT", MAX_LIMIT)

    lim = int(limit) if limit is not None else default_limit
    if lim <= 0:
        lim = default_limit
    lim = min(lim, max_limit)
    off = max(0, int(offset or 0))
    return Pagination(limit=lim, offset=off)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Offer shared validation helpers (pagination, identity, ownership).

    Notes
    -----
    - Services never touch the global session; they always go through a
      Unit of Work.
    - Services never import request objects; the caller identity is passed in.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        :param ctx: Optional request-scoped context (tracing, timeout).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def _statement_timeout_ms(self) -> int | None:
        if self.ctx.timeout_ms is not None:
            return self.ctx.timeout_ms
        if not has_app_context():
            return None
        return current_app.config.get("DB_STATEMENT_TIMEOUT_MS")

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork(statement_timeout_ms=self._statement_timeout_ms())

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED", "REPEATABLE READ").
        :type isolation: str | None
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
            statement_timeout_ms=self._statement_timeout_ms(),
        )

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(self, *, limit: int | None = None, offset: int | None = None) -> Pagination:
        """Delegate to the module-level :func:`ensure_pagination`."""
        return ensure_pagination(limit, offset)

    def require_actor(self, actor_id: uuid.UUID | None) -> uuid.UUID:
        """
        Return ``actor_id`` or fail when the caller is anonymous.

        :raises AuthenticationRequiredError: If ``actor_id`` is ``None``.
        """
        if actor_id is None:
            raise AuthenticationRequiredError()
        return actor_id

    @staticmethod
    def require_content(content: str | None, *, field: str = "content") -> str:
        """
        Strip ``content`` and reject blank values.

        :raises InvalidArgumentError: If nothing but whitespace remains.
        """
        value = (content or "").strip()
        if not value:
            raise InvalidArgumentError(f"{field} must not be empty.")
        return value

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            # AlreadyExistsError keeps its own code
            return api_errors.Conflict(str(exc), code=exc.code)

        if isinstance(exc, AuthenticationRequiredError | InvalidCredentialsError | InvalidTokenError):
            return api_errors.Unauthorized(str(exc), code=exc.code)

        if isinstance(exc, AuthorizationError):
            return api_errors.Forbidden(str(exc) or "Forbidden")

        if isinstance(exc, UnsupportedOperationError):
            return api_errors.NotImplementedByProvider(str(exc))

        if isinstance(exc, InternalError):
            translated = api_errors.InternalServerError()
            translated.__cause__ = exc.__cause__ or exc
            return translated

        if isinstance(exc, InvalidArgumentError):
            return api_errors.BadRequest(str(exc), code=exc.code)

        if isinstance(exc, ServiceError):
            return api_errors.BadRequest(str(exc))

        return exc

    # --------------------------- AuthZ --------------------------------

    def ensure_owner(
        self, actor_id: uuid.UUID | None, owner_id: uuid.UUID, *, msg: str | None = None
    ) -> None:
        """
        Ensure the current actor is the resource owner.

        :param actor_id: Authenticated caller id.
        :param owner_id: Expected owner id.
        :param msg: Optional custom error message.
        :raises AuthorizationError: If the actor is not the owner.
        """
        if not is_owner(actor_id=actor_id, owner_id=owner_id):
            raise AuthorizationError(msg or "You can only modify your own resources.")
