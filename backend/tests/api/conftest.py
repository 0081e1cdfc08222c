"""Fixtures for HTTP-level tests against the Flask test client."""

from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from tests.helpers.utils import bearer

API = "/api/v1"


@pytest.fixture()
def api():
    """Prefix a path with the versioned API root."""

    def _url(path: str) -> str:
        return f"{API}{path}"

    return _url


@pytest.fixture()
def auth_headers(issue_tokens, session):
    """Create a committed user and return ``(user, headers)``."""

    def _make(**overrides):
        user = UserFactory(**overrides)
        session.commit()
        return user, bearer(issue_tokens(user).access_token)

    return _make
