"""Unit tests for FollowRepository and NotificationRepository."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from horizon.repositories.base import Pagination
from horizon.repositories.follow import FollowRepository
from horizon.repositories.notification import NotificationRepository

from tests.factories.follow import FollowFactory
from tests.factories.notification import NotificationFactory
from tests.factories.user import UserFactory

WINDOW = Pagination(limit=10, offset=0)


def test_followers_and_pending_requests_are_separate(session):
    repo = FollowRepository(session=session)
    target = UserFactory()
    fan = FollowFactory(followed=target)
    asker = FollowFactory(followed=target, is_accepted=False)

    followers = repo.list_followers(target.id, WINDOW)
    pending = repo.list_followers(target.id, WINDOW, accepted=False)

    assert [user.id for user, _ in followers.items] == [fan.follower_id]
    assert [user.id for user, _ in pending.items] == [asker.follower_id]


def test_following_lists_newest_edge_first(session):
    repo = FollowRepository(session=session)
    me = UserFactory()
    t0 = datetime(2026, 1, 1, tzinfo=UTC)
    first = FollowFactory(follower=me, created_at=t0)
    second = FollowFactory(follower=me, created_at=t0 + timedelta(minutes=1))

    page = repo.list_following(me.id, WINDOW)

    assert [user.id for user, _ in page.items] == [second.followed_id, first.followed_id]
    assert page.total == 2


def test_remove_edge_reports_rows(session):
    repo = FollowRepository(session=session)
    edge = FollowFactory()

    assert repo.remove_edge(edge.follower_id, edge.followed_id) == 1
    assert repo.remove_edge(edge.follower_id, edge.followed_id) == 0


def test_notifications_are_scoped_to_recipient(session):
    repo = NotificationRepository(session=session)
    mine = NotificationFactory()
    NotificationFactory()

    page = repo.list_for_recipient(mine.user_id, WINDOW)

    assert [n.id for n in page.items] == [mine.id]
    assert repo.get_owned(mine.id, UserFactory().id) is None
    assert repo.get_owned(mine.id, mine.user_id).id == mine.id


def test_mark_all_read_and_unread_count(session):
    repo = NotificationRepository(session=session)
    recipient = UserFactory()
    NotificationFactory(recipient=recipient)
    NotificationFactory(recipient=recipient)
    NotificationFactory(recipient=recipient, read=True)

    assert repo.count_unread(recipient.id) == 2
    assert repo.mark_all_read(recipient.id) == 2
    assert repo.count_unread(recipient.id) == 0
