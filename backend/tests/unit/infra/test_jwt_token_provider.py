"""JWTTokenProvider on top of Flask-JWT-Extended."""

from __future__ import annotations

from datetime import timedelta

import pytest
from horizon.infra.jwt.token_provider import JWTTokenProvider
from horizon.services._shared.errors import ExpiredTokenError, InvalidTokenError


@pytest.fixture()
def tokens(app):
    with app.app_context():
        yield JWTTokenProvider()


def test_access_token_round_trip(tokens):
    token = tokens.create_access_token(identity="abc", additional_claims={"scope": "read"})

    claims = tokens.decode(token)

    assert claims["sub"] == "abc"
    assert claims["type"] == "access"
    assert claims["scope"] == "read"
    assert tokens.get_expires_at(claims).tzinfo is not None


def test_refresh_token_uses_store_jti(tokens):
    token = tokens.create_refresh_token(identity="abc", jti="store-owned-jti")

    claims = tokens.decode(token)

    assert claims["type"] == "refresh"
    assert claims["jti"] == "store-owned-jti"


def test_expired_token(tokens):
    token = tokens.create_access_token(identity="abc", expires_delta=timedelta(seconds=-60))
    with pytest.raises(ExpiredTokenError):
        tokens.decode(token)


@pytest.mark.parametrize("raw", ["", "garbage", "a.b.c"])
def test_malformed_tokens(tokens, raw):
    with pytest.raises(InvalidTokenError):
        tokens.decode(raw)


def test_tampered_signature(tokens):
    token = tokens.create_access_token(identity="abc")
    head, body, sig = token.split(".")
    flipped = ("A" if sig[0] != "A" else "B") + sig[1:]
    with pytest.raises(InvalidTokenError):
        tokens.decode(f"{head}.{body}.{flipped}")
