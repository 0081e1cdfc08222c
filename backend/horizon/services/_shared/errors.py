"""
Domain-level exceptions used within the service layer.

These exceptions are framework-agnostic: they never import Flask or HTTP
concepts. Each class carries a stable ``code`` so callers can branch on the
kind of failure while the message text stays free to change.

The translation to HTTP responses (RFC 7807) happens in
``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message. SQLite reports
    ``UNIQUE constraint failed: <table>.<column>`` instead, so callers pass
    either form.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :type exc: IntegrityError
    :param constraint_name: Constraint name or ``table.column`` fragment.
    :type constraint_name: str
    :returns: ``True`` if the error message mentions it.
    :rtype: bool
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them through ``BaseService.translate_exceptions``.
    """

    code: ClassVar[str] = "service_error"


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is absent or soft-deleted.

    :param entity: Entity name (e.g., "Post").
    :type entity: str
    :param key: Identifier or search key.
    :type key: object
    """

    entity: str
    key: object
    code: ClassVar[str] = "not_found"

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique key is already taken (username, email...).

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str
    code: ClassVar[str] = "conflict"

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


@dataclass(slots=True)
class AlreadyExistsError(ConflictError):
    """Raised when a ledger pair or follow edge is recorded twice."""

    code: ClassVar[str] = "already_exists"

    def __str__(self) -> str:
        return f"{self.entity} {self.detail}"


class AuthenticationRequiredError(ServiceError):
    """Raised when an operation needs a caller identity and none was given."""

    code: ClassVar[str] = "unauthorized"

    def __init__(self, message: str = "Authentication required.") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """Raised when the caller is not allowed to act on a resource (e.g. not its owner)."""

    code: ClassVar[str] = "forbidden"


class InvalidArgumentError(ServiceError):
    """Raised for semantically invalid input: empty content, self-follow..."""

    code: ClassVar[str] = "invalid_argument"


class InvalidCredentialsError(ServiceError):
    """Raised when a password does not match the stored hash."""

    code: ClassVar[str] = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials.") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """Raised for tokens with a bad signature, algorithm, type or subject."""

    code: ClassVar[str] = "invalid_token"

    def __init__(self, message: str = "Invalid token.") -> None:
        super().__init__(message)


class ExpiredTokenError(InvalidTokenError):
    """Raised when a token's ``exp`` has passed (beyond the leeway)."""

    code: ClassVar[str] = "expired_token"

    def __init__(self, message: str = "Token has expired.") -> None:
        super().__init__(message)


class UnsupportedOperationError(ServiceError):
    """Raised by identity providers that delegate an operation elsewhere."""

    code: ClassVar[str] = "unsupported_operation"


class InternalError(ServiceError):
    """
    Raised when the store or the transaction fails.

    The original exception is chained as ``__cause__`` for logging; the
    message shown to clients stays generic.
    """

    code: ClassVar[str] = "internal"

    def __init__(self, message: str = "Internal error while processing the operation.") -> None:
        super().__init__(message)
