"""Unit tests for UserRepository."""

from __future__ import annotations

import pytest
from horizon.repositories.user import UserRepository

from tests.factories.follow import FollowFactory
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` lookups honor soft deletion and normalization."""

    @pytest.fixture()
    def repo(self, session):
        return UserRepository(session=session)

    def test_get_by_username_and_email(self, repo, session):
        u = UserFactory(username="alice", email="alice@example.com")

        assert repo.get_by_username("alice").id == u.id
        assert repo.get_by_email("ALICE@example.com").id == u.id
        assert repo.get_by_username("nobody") is None

    def test_get_by_login_accepts_username_or_email(self, repo, session):
        u = UserFactory(username="bob", email="bob@example.com")

        assert repo.get_by_login("bob").id == u.id
        assert repo.get_by_login("Bob@Example.com").id == u.id

    def test_deleted_users_are_invisible(self, repo, session):
        u = UserFactory(username="ghost")
        u.mark_deleted()
        session.flush()

        assert repo.get_by_username("ghost") is None
        assert repo.get_live(u.id) is None
        assert repo.get(u.id) is not None

    def test_exists_checks(self, repo, session):
        UserFactory(username="carol", email="carol@example.com")

        assert repo.exists_username("carol")
        assert repo.exists_email("carol@example.com")
        assert not repo.exists_username("dave")
        assert not repo.exists_email("dave@example.com")

    def test_follow_counts_only_accepted_edges(self, repo, session):
        star = UserFactory()
        FollowFactory(followed=star)
        FollowFactory(followed=star)
        FollowFactory(followed=star, is_accepted=False)
        FollowFactory(follower=star)

        assert repo.count_followers(star.id) == 2
        assert repo.count_following(star.id) == 1
