"""Likes and bookmarks keep the counter and the ledger in agreement."""

from __future__ import annotations

import uuid

import pytest
from horizon.models.notification import Notification, NotificationType
from horizon.models.post import Post
from horizon.repositories.interaction import LikeRepository
from horizon.services._shared.errors import (
    AlreadyExistsError,
    AuthenticationRequiredError,
    NotFoundError,
)
from horizon.services.notifications import NotificationFanout
from horizon.services.posts import InteractionService
from sqlalchemy import select

from tests.factories.interaction import BookmarkFactory
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def service(app) -> InteractionService:
    return InteractionService()


def _ledger_count(session, post_id):
    return LikeRepository(session=session).count_for_post(post_id)


class _FailingNotifications:
    def create(self, dto):
        raise RuntimeError("notification store unavailable")


def test_like_increments_once_and_notifies_author(service, session):
    post = PostFactory()
    fan = UserFactory()
    session.commit()

    state = service.like(post.id, fan.id)

    assert state.like_count == 1
    assert state.has_liked is True
    assert service.has_liked(post.id, fan.id)
    assert _ledger_count(session, post.id) == 1
    notes = session.execute(select(Notification).where(Notification.user_id == post.user_id)).scalars().all()
    assert [(n.type, n.actor_id, n.post_id) for n in notes] == [(NotificationType.LIKE, fan.id, post.id)]


def test_double_like_is_rejected_and_counter_unchanged(service, session):
    post = PostFactory()
    fan = UserFactory()
    session.commit()
    service.like(post.id, fan.id)

    with pytest.raises(AlreadyExistsError):
        service.like(post.id, fan.id)

    session.expire_all()
    assert session.get(Post, post.id).like_count == 1
    assert _ledger_count(session, post.id) == 1


def test_unlike_decrements_only_when_a_row_was_removed(service, session):
    post = PostFactory()
    fan, bystander = UserFactory(), UserFactory()
    session.commit()
    service.like(post.id, fan.id)

    assert service.unlike(post.id, bystander.id).like_count == 1
    assert service.unlike(post.id, fan.id).like_count == 0
    assert service.unlike(post.id, fan.id).like_count == 0
    assert _ledger_count(session, post.id) == 0


def test_counter_matches_ledger_after_many_operations(service, session):
    post = PostFactory()
    users = [UserFactory() for _ in range(4)]
    session.commit()

    for u in users:
        service.like(post.id, u.id)
    service.unlike(post.id, users[0].id)
    service.unlike(post.id, users[0].id)
    with pytest.raises(AlreadyExistsError):
        service.like(post.id, users[1].id)

    session.expire_all()
    assert session.get(Post, post.id).like_count == _ledger_count(session, post.id) == 3


def test_self_like_does_not_notify(service, session):
    post = PostFactory()
    session.commit()

    service.like(post.id, post.user_id)

    assert session.execute(select(Notification)).scalars().all() == []


def test_cannot_like_invisible_or_missing_posts(service, session):
    secret = PostFactory(is_private=True)
    stranger = UserFactory()
    session.commit()

    with pytest.raises(NotFoundError):
        service.like(secret.id, stranger.id)
    with pytest.raises(NotFoundError):
        service.like(uuid.uuid4(), stranger.id)


def test_posts_by_deleted_authors_cannot_be_liked_or_bookmarked(service, session):
    post = PostFactory()
    fan = UserFactory()
    post.author.mark_deleted()
    session.commit()

    with pytest.raises(NotFoundError):
        service.like(post.id, fan.id)
    with pytest.raises(NotFoundError):
        service.bookmark(post.id, fan.id)

    assert _ledger_count(session, post.id) == 0
    assert service.has_bookmarked(post.id, fan.id) is False


def test_like_commits_even_when_notification_delivery_fails(session):
    post = PostFactory()
    fan = UserFactory()
    session.commit()
    service = InteractionService(notifier=NotificationFanout(service=_FailingNotifications()))

    state = service.like(post.id, fan.id)

    assert state.like_count == 1
    session.expire_all()
    assert session.get(Post, post.id).like_count == 1
    assert _ledger_count(session, post.id) == 1
    assert session.execute(select(Notification)).scalars().all() == []


def test_anonymous_callers(service, session):
    post = PostFactory()
    session.commit()

    assert service.has_liked(post.id, None) is False
    assert service.has_bookmarked(post.id, None) is False
    with pytest.raises(AuthenticationRequiredError):
        service.like(post.id, None)


def test_bookmark_lifecycle(service, session):
    post = PostFactory()
    reader = UserFactory()
    session.commit()

    service.bookmark(post.id, reader.id)
    assert service.has_bookmarked(post.id, reader.id)
    with pytest.raises(AlreadyExistsError):
        service.bookmark(post.id, reader.id)

    service.unbookmark(post.id, reader.id)
    assert not service.has_bookmarked(post.id, reader.id)
    with pytest.raises(NotFoundError):
        service.unbookmark(post.id, reader.id)


def test_bookmarks_do_not_touch_like_counter(service, session):
    saved = BookmarkFactory()
    session.commit()

    post_id = saved.post_id
    service.unbookmark(post_id, saved.user_id)

    session.expire_all()
    assert session.get(Post, post_id).like_count == 0
