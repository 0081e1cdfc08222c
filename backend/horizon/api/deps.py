"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from horizon.core.errors import BadRequest
from horizon.core.logger import ensure_request_id
from horizon.schemas.common import PaginationQuerySchema
from horizon.services._shared.base import ServiceContext
from horizon.services._shared.errors import AuthenticationRequiredError, InvalidTokenError

F = TypeVar("F", bound=Callable[..., Any])

_BEARER = "bearer"


@dataclass(slots=True)
class Pagination:
    """Container holding pagination arguments parsed from the request."""

    limit: int | None
    offset: int | None


def parse_pagination() -> Pagination:
    """Parse ``limit``/``offset`` from ``request.args`` using Marshmallow."""

    data = PaginationQuerySchema().load(request.args)
    return Pagination(limit=data["limit"], offset=data["offset"])


def parse_uuid(raw: str, *, field: str = "id") -> uuid.UUID:
    """Parse a path segment as a UUID, answering 400 when malformed."""

    try:
        return uuid.UUID(raw)
    except ValueError as exc:
        raise BadRequest(f"Invalid {field}: {raw!r}", code="invalid_argument") from exc


def auth_provider():
    """Return the identity backend selected at startup."""

    return current_app.extensions["auth_provider"]


def service_context() -> ServiceContext:
    """Build the per-request service context carrying the request id."""

    return ServiceContext(request_id=ensure_request_id())


def bearer_token() -> str | None:
    """Extract the token from ``Authorization: Bearer <token>``, if present."""

    header = request.headers.get("Authorization", "")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != _BEARER or not token.strip():
        raise InvalidTokenError("Malformed Authorization header.")
    return token.strip()


def current_user_id() -> uuid.UUID | None:
    """User id authenticated for this request, ``None`` for anonymous callers."""

    return getattr(g, "user_id", None)


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token and expose its user id."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        if token is None:
            raise AuthenticationRequiredError()
        g.user_id = auth_provider().verify_token(token)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Authenticate when a token is sent; anonymous requests pass through.

    A token that is present but invalid is still rejected.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        g.user_id = auth_provider().verify_token(token) if token else None
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    if status == 204:
        return Response(status=204)
    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
