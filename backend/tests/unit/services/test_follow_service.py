"""FollowService: edge state machine and follower listings."""

from __future__ import annotations

import uuid

import pytest
from horizon.models.follow import Follow
from horizon.models.notification import Notification, NotificationType
from horizon.services._shared.errors import (
    AlreadyExistsError,
    AuthenticationRequiredError,
    InvalidArgumentError,
    NotFoundError,
)
from horizon.services.follows import FollowIn, FollowService
from horizon.services.notifications import NotificationFanout
from sqlalchemy import func, select

from tests.factories.follow import FollowFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def service(app) -> FollowService:
    return FollowService()


class _FailingNotifications:
    def create(self, dto):
        raise RuntimeError("notification store unavailable")


class TestFollowCommands:
    def test_public_account_is_followed_immediately(self, service, session):
        alice, bob = UserFactory(), UserFactory()
        session.commit()

        out = service.follow(FollowIn(follower_id=alice.id, followed_id=bob.id))

        assert out.is_accepted is True
        assert service.get_follow_status(alice.id, bob.id).is_accepted is True
        note = session.execute(select(Notification)).scalar_one()
        assert (note.user_id, note.actor_id, note.type) == (bob.id, alice.id, NotificationType.FOLLOW)

    def test_follow_survives_a_failing_notification_store(self, session):
        alice, bob = UserFactory(), UserFactory()
        session.commit()
        service = FollowService(notifier=NotificationFanout(service=_FailingNotifications()))

        out = service.follow(FollowIn(follower_id=alice.id, followed_id=bob.id))

        assert out.is_accepted is True
        assert session.get(Follow, (alice.id, bob.id)) is not None
        assert session.execute(select(Notification)).scalars().all() == []

    def test_private_account_gets_a_pending_request(self, service, session):
        alice, carol = UserFactory(), UserFactory(is_private=True)
        session.commit()

        out = service.follow(FollowIn(follower_id=alice.id, followed_id=carol.id))

        assert out.is_accepted is False
        status = service.get_follow_status(alice.id, carol.id)
        assert (status.is_following, status.is_accepted) == (True, False)
        pending = service.get_pending_requests(carol.id)
        assert [u.id for u in pending.items] == [alice.id]

    def test_accepting_moves_request_to_followers(self, service, session):
        alice, carol = UserFactory(), UserFactory(is_private=True)
        session.commit()
        service.follow(FollowIn(follower_id=alice.id, followed_id=carol.id))

        out = service.accept_follow_request(FollowIn(follower_id=alice.id, followed_id=carol.id))
        again = service.accept_follow_request(FollowIn(follower_id=alice.id, followed_id=carol.id))

        assert out.is_accepted and again.is_accepted
        assert service.get_pending_requests(carol.id).total == 0
        assert [u.id for u in service.get_followers(carol.id).items] == [alice.id]

    def test_self_follow_is_rejected_before_any_lookup(self, service, session):
        ghost = uuid.uuid4()
        with pytest.raises(InvalidArgumentError):
            service.follow(FollowIn(follower_id=ghost, followed_id=ghost))

    def test_duplicate_follow_in_any_state(self, service, session):
        edge = FollowFactory(is_accepted=False)
        session.commit()

        with pytest.raises(AlreadyExistsError):
            service.follow(FollowIn(follower_id=edge.follower_id, followed_id=edge.followed_id))

        count = session.execute(select(func.count()).select_from(Follow)).scalar_one()
        assert count == 1

    def test_follow_unknown_or_deleted_user(self, service, session):
        alice, gone = UserFactory(), UserFactory()
        gone.mark_deleted()
        session.commit()

        with pytest.raises(NotFoundError):
            service.follow(FollowIn(follower_id=alice.id, followed_id=gone.id))
        with pytest.raises(NotFoundError):
            service.follow(FollowIn(follower_id=alice.id, followed_id=uuid.uuid4()))

    def test_unfollow_removes_edge_whatever_its_state(self, service, session):
        pending = FollowFactory(is_accepted=False)
        session.commit()

        service.unfollow(FollowIn(follower_id=pending.follower_id, followed_id=pending.followed_id))

        with pytest.raises(NotFoundError):
            service.unfollow(
                FollowIn(follower_id=pending.follower_id, followed_id=pending.followed_id)
            )

    def test_accepting_a_missing_request(self, service, session):
        alice, bob = UserFactory(), UserFactory()
        session.commit()
        with pytest.raises(NotFoundError):
            service.accept_follow_request(FollowIn(follower_id=alice.id, followed_id=bob.id))

    def test_anonymous_follow_requires_authentication(self, service):
        with pytest.raises(AuthenticationRequiredError):
            service.follow(FollowIn(follower_id=None, followed_id=uuid.uuid4()))  # type: ignore[arg-type]


class TestFollowQueries:
    def test_status_for_anonymous_and_self(self, service, session):
        alice = UserFactory()
        session.commit()

        for viewer in (None, alice.id):
            status = service.get_follow_status(viewer, alice.id)
            assert (status.is_following, status.is_accepted) == (False, False)

    def test_followers_and_following_exclude_pending_edges(self, service, session):
        target = UserFactory()
        accepted = FollowFactory(followed=target)
        FollowFactory(followed=target, is_accepted=False)
        session.commit()

        followers = service.get_followers(target.id)
        assert followers.total == 1
        assert followers.items[0].id == accepted.follower_id
        assert [u.id for u in service.get_following(accepted.follower_id).items] == [target.id]

    def test_listing_for_unknown_user(self, service, session):
        with pytest.raises(NotFoundError):
            service.get_followers(uuid.uuid4())
        with pytest.raises(NotFoundError):
            service.get_following(uuid.uuid4())

    def test_followers_are_paginated(self, service, session):
        target = UserFactory()
        FollowFactory.create_batch(5, followed=target)
        session.commit()

        page = service.get_followers(target.id, limit=2, offset=2)

        assert page.total == 5
        assert len(page.items) == 2
        assert page.has_next is True
