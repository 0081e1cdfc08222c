"""HostedAuthProvider trusts tokens minted by an external identity service."""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from horizon.services._shared.errors import (
    ExpiredTokenError,
    InvalidTokenError,
    NotFoundError,
    UnsupportedOperationError,
)
from horizon.services.auth import HostedAuthProvider, LoginIn, RefreshIn, RegisterIn, build_auth_provider
from horizon.services.auth.service import LocalAuthProvider

from tests.factories.user import UserFactory
from tests.helpers.utils import forge_token

KEY = "hosted-shared-secret-0123456789abcdef"
ISSUER = "https://id.example.com/"
AUDIENCE = "horizon-api"


@pytest.fixture()
def hosted(app) -> HostedAuthProvider:
    return HostedAuthProvider(key=KEY, algorithms=["HS256"], issuer=ISSUER, audience=AUDIENCE)


def _token(sub: str, **overrides) -> str:
    claims = {"key": KEY, "iss": ISSUER, "aud": AUDIENCE}
    claims.update(overrides)
    return forge_token(sub=sub, **claims)


def test_account_operations_are_unsupported(hosted):
    with pytest.raises(UnsupportedOperationError):
        hosted.register(RegisterIn(username="x", email="x@example.com", password="s3cret-pass"))
    with pytest.raises(UnsupportedOperationError):
        hosted.login(LoginIn(username="x", password="s3cret-pass"))
    with pytest.raises(UnsupportedOperationError):
        hosted.refresh(RefreshIn(refresh_token="anything"))


def test_valid_token_resolves_to_local_user(hosted, session):
    user = UserFactory()
    session.commit()

    token = _token(user.id.hex)

    assert hosted.verify_token(token) == user.id
    assert hosted.get_user_from_token(token).username == user.username


def test_unknown_subject_is_not_found(hosted, session):
    with pytest.raises(NotFoundError):
        hosted.get_user_from_token(_token(uuid.uuid4().hex))


@pytest.mark.parametrize(
    "overrides",
    [{"iss": "https://evil.example.com/"}, {"aud": "someone-else"}, {"key": "wrong-key-0123456789abcdef-0123456789abcdef"}],
    ids=["issuer", "audience", "signature"],
)
def test_mismatched_claims_are_rejected(hosted, overrides):
    with pytest.raises(InvalidTokenError):
        hosted.verify_token(_token(uuid.uuid4().hex, **overrides))


def test_expired_hosted_token(hosted):
    token = _token(uuid.uuid4().hex, expires_in=timedelta(seconds=-30))
    with pytest.raises(ExpiredTokenError):
        hosted.verify_token(token)


def test_missing_key_is_a_startup_error():
    with pytest.raises(RuntimeError):
        HostedAuthProvider(key="", algorithms=["RS256"])


def test_provider_selection_follows_environment(app):
    saved = {k: app.config.get(k) for k in ("APP_ENV", "HOSTED_AUTH_ENABLED", "HOSTED_AUTH_JWT_KEY")}
    try:
        app.config.update(APP_ENV="production", HOSTED_AUTH_ENABLED=True, HOSTED_AUTH_JWT_KEY=KEY)
        assert isinstance(build_auth_provider(app), HostedAuthProvider)

        app.config.update(APP_ENV="development")
        assert isinstance(build_auth_provider(app), LocalAuthProvider)

        app.config.update(APP_ENV="production", HOSTED_AUTH_ENABLED=False)
        assert isinstance(build_auth_provider(app), LocalAuthProvider)
    finally:
        app.config.update(saved)


def test_unknown_refresh_store_is_rejected(app):
    saved = app.config["AUTH_REFRESH_STORE"]
    try:
        app.config["AUTH_REFRESH_STORE"] = "carrier-pigeon"
        with pytest.raises(RuntimeError):
            build_auth_provider(app)
    finally:
        app.config["AUTH_REFRESH_STORE"] = saved
