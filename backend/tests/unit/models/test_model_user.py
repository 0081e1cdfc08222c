"""Unit tests for the User model."""

from __future__ import annotations

import pytest
from horizon.models.user import User
from sqlalchemy.exc import IntegrityError

from tests.factories.user import DEFAULT_PASSWORD, UserFactory


def test_email_is_normalized():
    user = User(username="mixed", email="  Mixed.Case@Example.COM ", password="secret123")
    assert user.email == "mixed.case@example.com"


def test_invalid_email_is_rejected():
    with pytest.raises(ValueError):
        User(username="nomail", email="not-an-email", password="secret123")


def test_blank_username_is_rejected():
    with pytest.raises(ValueError):
        User(username="   ", email="x@example.com", password="secret123")


def test_password_is_write_only_and_hashed():
    user = User(username="hasher", email="h@example.com", password="s3cret-pass")
    assert user.password_hash != "s3cret-pass"
    assert user.verify_password("s3cret-pass")
    assert not user.verify_password("wrong")
    with pytest.raises(AttributeError):
        _ = user.password


def test_empty_password_is_rejected():
    with pytest.raises(ValueError):
        User(username="nopass", email="np@example.com", password="")


def test_factory_user_signs_in_with_default_password(session):
    user = UserFactory()
    assert user.verify_password(DEFAULT_PASSWORD)


def test_username_is_unique(session):
    UserFactory(username="taken")
    with pytest.raises(IntegrityError):
        UserFactory(username="taken", email="other@example.com")
