# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import cast

import redis

from horizon.services._shared.ports import RefreshSessionView, RefreshTokenStore, RotationResult


def _decode(value: bytes | str | None, default: str = "") -> str:
    if value is None:
        return default
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store with atomic rotation.

    Layout: one hash per token (``rt:<jti>``) expiring with the token, and
    one set per user (``rt:u:<user_id>``) indexing that user's tokens.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _k(jti: str) -> str:
        return f"rt:{jti}"

    @staticmethod
    def _ku(user_id: str) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    # -------------------- API ------------------------

    def register(self, *, jti: str, user_id: str, expires_at: datetime) -> None:
        """Insert the token record *before* the JWT is handed to the client."""
        exp_ts = self._to_ts(expires_at)
        ttl = max(1, exp_ts - self._to_ts(datetime.now(UTC)))

        pipe = self.r.pipeline(transaction=True)
        pipe.hset(
            self._k(jti),
            mapping={"user_id": user_id, "expires_at": str(exp_ts), "used": "0", "revoked": "0"},
        )
        pipe.expire(self._k(jti), ttl)
        pipe.sadd(self._ku(user_id), jti)
        pipe.execute()

    def rotate(
        self, *, old_jti: str, new_jti: str, now: datetime, new_expires_at: datetime
    ) -> RotationResult:
        """
        Atomically consume ``old_jti`` and create ``new_jti``.

        Uses WATCH/MULTI/EXEC: if another client touches the old token between
        the read and the write, the transaction aborts and the check reruns,
        so a token can be consumed only once.
        """
        now_ts = self._to_ts(now)
        new_exp_ts = self._to_ts(new_expires_at)
        ttl = max(1, new_exp_ts - now_ts)
        k_old = self._k(old_jti)
        k_new = self._k(new_jti)

        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_old)
                    h = cast(dict[bytes, bytes], p.hgetall(k_old))
                    if not h:
                        p.unwatch()
                        return RotationResult.NOT_FOUND

                    user_id = _decode(h.get(b"user_id"))
                    if int(_decode(h.get(b"expires_at"), "0")) <= now_ts:
                        p.unwatch()
                        return RotationResult.EXPIRED
                    if _decode(h.get(b"revoked"), "0") == "1":
                        p.unwatch()
                        return RotationResult.REVOKED
                    if _decode(h.get(b"used"), "0") == "1":
                        p.unwatch()
                        return RotationResult.REUSED

                    p.multi()
                    p.hset(k_old, "used", "1")
                    p.hset(
                        k_new,
                        mapping={
                            "user_id": user_id,
                            "expires_at": str(new_exp_ts),
                            "used": "0",
                            "revoked": "0",
                        },
                    )
                    p.expire(k_new, ttl)
                    p.sadd(self._ku(user_id), new_jti)
                    p.execute()
                return RotationResult.OK
            except redis.WatchError:
                continue

    def mark_revoked(self, jti: str) -> bool:
        key = self._k(jti)
        user_id = self.r.hget(key, "user_id")
        if not user_id:
            return False
        with self.r.pipeline(transaction=True) as p:
            p.hset(key, "revoked", "1")
            p.srem(self._ku(_decode(user_id)), jti)
            p.execute()
        return True

    def revoke_all_for_user(self, user_id: str) -> int:
        key_u = self._ku(user_id)
        jtis = [_decode(m) for m in self.r.smembers(key_u)]
        if not jtis:
            return 0
        pipe = self.r.pipeline(transaction=True)
        for jti in jtis:
            # Only flag hashes that still exist; expired ones stay gone.
            if self.r.exists(self._k(jti)):
                pipe.hset(self._k(jti), "revoked", "1")
        pipe.delete(key_u)
        pipe.execute()
        return len(jtis)

    def get(self, jti: str) -> RefreshSessionView | None:
        h = cast(dict[bytes, bytes], self.r.hgetall(self._k(jti)))
        if not h:
            return None
        return RefreshSessionView(
            jti=jti,
            user_id=_decode(h.get(b"user_id")),
            used=_decode(h.get(b"used"), "0") == "1",
            revoked=_decode(h.get(b"revoked"), "0") == "1",
            expires_at=datetime.fromtimestamp(int(_decode(h.get(b"expires_at"), "0")), tz=UTC),
        )
