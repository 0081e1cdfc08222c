from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import Enum, auto
from typing import Protocol
from uuid import uuid4


class RotationResult(Enum):
    """Outcome of an atomic refresh rotation attempt."""

    OK = auto()
    NOT_FOUND = auto()
    EXPIRED = auto()
    REVOKED = auto()
    REUSED = auto()


@dataclass(frozen=True)
class RefreshSessionView:
    """
    Read-model for a registered refresh token.

    :ivar jti: Refresh token identifier.
    :ivar user_id: Owner user id (hex string).
    :ivar used: Whether the token has been consumed by a rotation.
    :ivar revoked: Whether the token has been explicitly revoked.
    :ivar expires_at: Absolute expiration (UTC).
    """

    jti: str
    user_id: str
    used: bool
    revoked: bool
    expires_at: datetime


class RefreshTokenStore(Protocol):
    """
    Revocation set for refresh tokens.

    Only consulted when ``AUTH_REFRESH_STORE`` is ``memory`` or ``redis``.
    Rotation MUST be atomic: two concurrent refreshes with the same token
    yield exactly one ``OK``.
    """

    def new_jti(self) -> str:
        """Generate a new random refresh token identifier."""
        return uuid4().hex

    def register(self, *, jti: str, user_id: str, expires_at: datetime) -> None:
        """Record a freshly issued refresh token *before* it leaves the server."""

    def rotate(
        self, *, old_jti: str, new_jti: str, now: datetime, new_expires_at: datetime
    ) -> RotationResult:
        """
        Atomically consume ``old_jti`` and register ``new_jti`` for the same user.

        :returns: ``RotationResult.OK`` on success, otherwise the specific failure.
        """

    def mark_revoked(self, jti: str) -> bool:
        """Revoke one token. :returns: True if it existed."""

    def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every registered token of ``user_id``. :returns: tokens affected."""

    def get(self, jti: str) -> RefreshSessionView | None:
        """Fetch a snapshot of a registered token."""


def _ts(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp())


@dataclass(frozen=True)
class _Entry:
    user_id: str
    expires_at: int
    used: bool = False
    revoked: bool = False


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    Process-local refresh token store.

    .. note::
       State is lost on restart and not shared between workers; suitable for
       development, tests and single-process deployments.
    """

    def __init__(self) -> None:
        self._by_jti: dict[str, _Entry] = {}
        self._by_user: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def register(self, *, jti: str, user_id: str, expires_at: datetime) -> None:
        with self._lock:
            self._by_jti[jti] = _Entry(user_id=user_id, expires_at=_ts(expires_at))
            self._by_user.setdefault(user_id, set()).add(jti)

    def rotate(
        self, *, old_jti: str, new_jti: str, now: datetime, new_expires_at: datetime
    ) -> RotationResult:
        with self._lock:
            entry = self._by_jti.get(old_jti)
            if entry is None:
                return RotationResult.NOT_FOUND
            if entry.expires_at <= _ts(now):
                return RotationResult.EXPIRED
            if entry.revoked:
                return RotationResult.REVOKED
            if entry.used:
                return RotationResult.REUSED

            self._by_jti[old_jti] = replace(entry, used=True)
            self._by_jti[new_jti] = _Entry(user_id=entry.user_id, expires_at=_ts(new_expires_at))
            self._by_user.setdefault(entry.user_id, set()).add(new_jti)
            return RotationResult.OK

    def mark_revoked(self, jti: str) -> bool:
        with self._lock:
            entry = self._by_jti.get(jti)
            if entry is None:
                return False
            self._by_jti[jti] = replace(entry, revoked=True)
            return True

    def revoke_all_for_user(self, user_id: str) -> int:
        with self._lock:
            jtis = self._by_user.pop(user_id, set())
            for jti in jtis:
                entry = self._by_jti.get(jti)
                if entry is not None:
                    self._by_jti[jti] = replace(entry, revoked=True)
            return len(jtis)

    def get(self, jti: str) -> RefreshSessionView | None:
        entry = self._by_jti.get(jti)
        if entry is None:
            return None
        return RefreshSessionView(
            jti=jti,
            user_id=entry.user_id,
            used=entry.used,
            revoked=entry.revoked,
            expires_at=datetime.fromtimestamp(entry.expires_at, tz=UTC),
        )
