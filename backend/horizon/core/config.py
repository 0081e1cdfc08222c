"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# 'development' | 'testing' | 'production'
ENV_VAR: Final[str] = "APP_ENV"


load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def env_list(name: str, default: str = "") -> list[str]:
    """Split a comma-separated environment variable into trimmed tokens."""
    raw = os.getenv(name, default)
    return [token.strip() for token in raw.split(",") if token.strip()]


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    APP_ENV: str
        Logical environment name, mirrored from ``APP_ENV``.
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET_KEY: str
        HMAC secret used to sign and verify access/refresh tokens.
    JWT_ALGORITHM: str
        Signing algorithm. Only this algorithm is accepted on decode.
    JWT_DECODE_LEEWAY: int
        Clock-skew tolerance in seconds applied to ``exp``/``nbf``/``iat``.
    JWT_ACCESS_TOKEN_EXPIRES / JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Token lifetimes (15 minutes and 7 days by default).
    DB_STATEMENT_TIMEOUT_MS: int
        Upper bound for a single statement inside a read-write unit of work.
        ``0`` disables the limit. Applied on PostgreSQL only.
    PAGINATION_DEFAULT_LIMIT / PAGINATION_MAX_LIMIT: int
        Listing contract shared by every paginated operation.
    AUTH_REFRESH_STORE: str
        ``"none"`` keeps refresh rotation stateless; ``"memory"`` or
        ``"redis"`` enable the refresh-token revocation set.
    HOSTED_AUTH_ENABLED: bool
        Delegate identity to the hosted provider (production only).

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    APP_ENV = "development"
    API_BASE_PREFIX = "/api"

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_DECODE_LEEWAY = env_int("JWT_DECODE_LEEWAY", 2)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("JWT_ACCESS_MINUTES", 15))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("JWT_REFRESH_DAYS", 7))
    JWT_TOKEN_LOCATION = ["headers"]

    # Refresh rotation policy
    AUTH_REFRESH_STORE = os.getenv("AUTH_REFRESH_STORE", "none").strip().lower()
    REDIS_URL = os.getenv("REDIS_URL")

    # Hosted identity provider
    HOSTED_AUTH_ENABLED = env_bool("HOSTED_AUTH_ENABLED", False)
    HOSTED_AUTH_JWT_KEY = os.getenv("HOSTED_AUTH_JWT_KEY", "")
    HOSTED_AUTH_ALGORITHMS = env_list("HOSTED_AUTH_ALGORITHMS", "RS256")
    HOSTED_AUTH_ISSUER = os.getenv("HOSTED_AUTH_ISSUER")
    HOSTED_AUTH_AUDIENCE = os.getenv("HOSTED_AUTH_AUDIENCE")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./horizon.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    DB_STATEMENT_TIMEOUT_MS = env_int("DB_STATEMENT_TIMEOUT_MS", 5000)

    # Listings
    PAGINATION_DEFAULT_LIMIT = 10
    PAGINATION_MAX_LIMIT = 50

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = "testing-secret"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    AUTH_REFRESH_STORE = "none"
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
