"""
Refresh token stores: the Redis store (on fakeredis) and the in-process one.

Both implement the same contract, so the rotation flows run against each:

- register + get
- rotate: OK, NOT_FOUND, EXPIRED, REVOKED, REUSED
- mark_revoked and revoke_all_for_user
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest
from horizon.infra.redis.refresh_token_store import RedisRefreshTokenStore
from horizon.services._shared.ports import InMemoryRefreshTokenStore, RotationResult


def _now() -> datetime:
    return datetime.now(UTC)


def _future(dt: datetime, seconds: int = 300) -> datetime:
    return dt + timedelta(seconds=seconds)


@pytest.fixture
def fake_redis():
    """Fresh FakeRedis instance per test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture(params=["redis", "memory"])
def store(request, fake_redis):
    if request.param == "redis":
        return RedisRefreshTokenStore(r=fake_redis)
    return InMemoryRefreshTokenStore()


def test_register_and_get(store):
    now = _now()
    store.register(jti="jti-1", user_id="user-1", expires_at=_future(now, 120))

    view = store.get("jti-1")
    assert view is not None
    assert (view.jti, view.user_id, view.used, view.revoked) == ("jti-1", "user-1", False, False)
    assert view.expires_at > now
    assert store.get("missing") is None


def test_rotate_success_consumes_old_token(store):
    now = _now()
    store.register(jti="old", user_id="u2", expires_at=_future(now, 120))

    assert store.rotate(old_jti="old", new_jti="new", now=now, new_expires_at=_future(now)) == RotationResult.OK

    assert store.get("old").used is True
    fresh = store.get("new")
    assert fresh.used is False
    assert fresh.user_id == "u2"


def test_second_rotation_is_reuse(store):
    now = _now()
    store.register(jti="old", user_id="u3", expires_at=_future(now, 120))
    store.rotate(old_jti="old", new_jti="new-1", now=now, new_expires_at=_future(now))

    res = store.rotate(old_jti="old", new_jti="new-2", now=now, new_expires_at=_future(now))

    assert res == RotationResult.REUSED
    assert store.get("new-2") is None


def test_rotate_not_found(store):
    now = _now()
    assert (
        store.rotate(old_jti="no-such", new_jti="x", now=now, new_expires_at=_future(now))
        == RotationResult.NOT_FOUND
    )


def test_rotate_expired(store):
    now = _now()
    store.register(jti="old", user_id="u6", expires_at=now - timedelta(seconds=10))

    assert (
        store.rotate(old_jti="old", new_jti="new", now=now, new_expires_at=_future(now))
        == RotationResult.EXPIRED
    )


def test_rotate_revoked(store):
    now = _now()
    store.register(jti="old", user_id="u10", expires_at=_future(now, 120))
    assert store.mark_revoked("old") is True

    assert (
        store.rotate(old_jti="old", new_jti="new", now=now, new_expires_at=_future(now))
        == RotationResult.REVOKED
    )
    assert store.mark_revoked("never-issued") is False


def test_revoke_all_for_user(store):
    now = _now()
    for jti in ("a", "b", "c"):
        store.register(jti=jti, user_id="bulk", expires_at=_future(now, 120))
    store.register(jti="other", user_id="someone-else", expires_at=_future(now, 120))

    assert store.revoke_all_for_user("bulk") == 3
    assert all(store.get(j).revoked for j in ("a", "b", "c"))
    assert store.get("other").revoked is False
    assert store.revoke_all_for_user("bulk") == 0


def test_redis_layout(fake_redis):
    """Token hashes expire with the token; the per-user index drops revoked ones."""
    store = RedisRefreshTokenStore(r=fake_redis)
    now = _now()
    store.register(jti="j1", user_id="u", expires_at=_future(now, 120))
    store.register(jti="j2", user_id="u", expires_at=_future(now, 120))

    assert 0 < fake_redis.ttl(store._k("j1")) <= 120

    store.mark_revoked("j1")
    members = {m.decode() for m in fake_redis.smembers(store._ku("u"))}
    assert members == {"j2"}
    assert fake_redis.hget(store._k("j1"), "revoked") == b"1"
