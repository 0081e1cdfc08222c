"""Authentication endpoints backed by the configured identity provider."""

from __future__ import annotations

from flask import Blueprint, request

from horizon.api.deps import auth_provider, bearer_token, json_response, require_auth, timing
from horizon.schemas import LoginSchema, RefreshSchema, RegisterSchema, TokenPairSchema, UserSchema
from horizon.services.auth import LoginIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
token_schema = TokenPairSchema()
user_schema = UserSchema()


@bp.post("/register")
@timing
def register():
    """Register a new user and return it together with a token pair."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    provider = auth_provider()
    user = provider.register(RegisterIn(**payload))
    tokens = provider.login(LoginIn(username=user.username, password=payload["password"]))
    body = {"data": {"user": user_schema.dump(user), "tokens": token_schema.dump(tokens)}}
    return json_response(body, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    tokens = auth_provider().login(LoginIn(**data))
    return json_response({"data": token_schema.dump(tokens)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new pair."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    tokens = auth_provider().refresh(RefreshIn(**data))
    return json_response({"data": token_schema.dump(tokens)})


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated account."""

    user = auth_provider().get_user_from_token(bearer_token())
    return json_response({"data": user_schema.dump(user)})
