"""Auth gate: identity backends behind one :class:`AuthProvider` interface."""

from __future__ import annotations

from .dto import AuthTokenConfig, LoginIn, RefreshIn, RegisterIn, TokenPairOut
from .hosted import HostedAuthProvider
from .provider import AuthProvider, build_auth_provider, parse_subject
from .service import LocalAuthProvider

__all__ = [
    "AuthProvider",
    "HostedAuthProvider",
    "LocalAuthProvider",
    "build_auth_provider",
    "parse_subject",
    # DTOs
    "AuthTokenConfig",
    "LoginIn",
    "RefreshIn",
    "RegisterIn",
    "TokenPairOut",
]
