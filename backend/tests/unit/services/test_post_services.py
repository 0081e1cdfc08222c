"""Post command and query services."""

from __future__ import annotations

import uuid

import pytest
from horizon.models.notification import Notification, NotificationType
from horizon.services._shared.errors import (
    AuthorizationError,
    InvalidArgumentError,
    NotFoundError,
)
from horizon.services.posts import (
    InteractionService,
    PostCommandService,
    PostCreateIn,
    PostQueryService,
    PostUpdateIn,
)
from sqlalchemy import select

from tests.factories.interaction import BookmarkFactory, LikeFactory
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def commands(app) -> PostCommandService:
    return PostCommandService()


@pytest.fixture()
def queries(app) -> PostQueryService:
    return PostQueryService()


class TestCreate:
    def test_create_trims_content_and_starts_at_zero(self, commands, session):
        author = UserFactory()
        session.commit()

        out = commands.create(
            PostCreateIn(author_id=author.id, content="  hello horizon  ", media_urls=["https://cdn/x.png"])
        )

        assert out.content == "hello horizon"
        assert out.author.username == author.username
        assert (out.like_count, out.reply_count, out.repost_count) == (0, 0, 0)
        assert out.media_urls == ["https://cdn/x.png"]
        assert out.has_liked is False

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_blank_content_is_rejected(self, commands, session, content):
        author = UserFactory()
        session.commit()
        with pytest.raises(InvalidArgumentError):
            commands.create(PostCreateIn(author_id=author.id, content=content))

    def test_reply_notifies_parent_author(self, commands, queries, session):
        parent = PostFactory()
        replier = UserFactory()
        session.commit()

        reply = commands.create(
            PostCreateIn(author_id=replier.id, content="agreed", reply_to_post_id=parent.id)
        )

        assert reply.reply_to_post_id == parent.id
        assert queries.get_post(parent.id, None).reply_count == 1
        note = session.execute(select(Notification)).scalar_one()
        assert note.type == NotificationType.REPLY
        assert (note.user_id, note.post_id, note.parent_post_id) == (parent.user_id, reply.id, parent.id)

    def test_reply_to_closed_thread(self, commands, session):
        parent = PostFactory(allow_replies=False)
        replier = UserFactory()
        session.commit()
        with pytest.raises(InvalidArgumentError):
            commands.create(PostCreateIn(author_id=replier.id, content="hi", reply_to_post_id=parent.id))

    def test_reply_to_hidden_or_missing_parent(self, commands, session):
        secret = PostFactory(is_private=True)
        replier = UserFactory()
        session.commit()
        for parent_id in (secret.id, uuid.uuid4()):
            with pytest.raises(NotFoundError):
                commands.create(PostCreateIn(author_id=replier.id, content="hi", reply_to_post_id=parent_id))

    def test_reply_to_post_of_deleted_author(self, commands, queries, session):
        parent = PostFactory()
        replier = UserFactory()
        parent.author.mark_deleted()
        session.commit()

        with pytest.raises(NotFoundError):
            commands.create(PostCreateIn(author_id=replier.id, content="hi", reply_to_post_id=parent.id))
        with pytest.raises(NotFoundError):
            queries.get_post(parent.id, replier.id)
        with pytest.raises(NotFoundError):
            queries.get_post_replies(parent.id, replier.id)
        assert queries.get_user_replies(replier.username, replier.id).total == 0


class TestEditAndDelete:
    def test_author_can_edit(self, commands, session):
        post = PostFactory(content="before")
        session.commit()

        out = commands.update_content(PostUpdateIn(post_id=post.id, actor_id=post.user_id, content="after"))

        assert out.content == "after"

    def test_non_author_cannot_edit_or_delete(self, commands, session):
        post = PostFactory()
        other = UserFactory()
        session.commit()

        with pytest.raises(AuthorizationError):
            commands.update_content(PostUpdateIn(post_id=post.id, actor_id=other.id, content="mine now"))
        with pytest.raises(AuthorizationError):
            commands.delete(post.id, other.id)

    def test_edit_with_blank_content(self, commands, session):
        post = PostFactory()
        session.commit()
        with pytest.raises(InvalidArgumentError):
            commands.update_content(PostUpdateIn(post_id=post.id, actor_id=post.user_id, content="  "))

    def test_deleted_post_disappears_everywhere(self, commands, queries, session):
        post = PostFactory()
        reply = PostFactory(reply_to=post)
        session.commit()

        commands.delete(post.id, post.user_id)

        with pytest.raises(NotFoundError):
            queries.get_post(post.id, post.user_id)
        with pytest.raises(NotFoundError):
            commands.delete(post.id, post.user_id)
        assert post.id not in {p.id for p in queries.get_posts(None).items}
        assert queries.get_post(reply.id, None).reply_to_post_id == post.id


class TestQueries:
    def test_timeline_is_newest_first_and_top_level_only(self, queries, session):
        first = PostFactory()
        second = PostFactory()
        PostFactory(reply_to=first)
        session.commit()

        page = queries.get_posts(None)

        assert [p.id for p in page.items] == [second.id, first.id]
        assert page.total == 2

    def test_private_posts_only_visible_to_author(self, queries, session):
        secret = PostFactory(is_private=True)
        stranger = UserFactory()
        session.commit()

        assert queries.get_post(secret.id, secret.user_id).is_private is True
        with pytest.raises(NotFoundError):
            queries.get_post(secret.id, stranger.id)
        with pytest.raises(NotFoundError):
            queries.get_post(secret.id, None)
        assert queries.get_posts(stranger.id).total == 0
        assert queries.get_posts(secret.user_id).total == 1

    def test_viewer_annotations(self, queries, session):
        post = PostFactory()
        viewer = UserFactory()
        LikeFactory(post=post, user=viewer)
        BookmarkFactory(post=post, user=viewer)
        session.commit()

        seen = queries.get_post(post.id, viewer.id)
        anonymous = queries.get_post(post.id, None)

        assert (seen.has_liked, seen.has_bookmarked, seen.like_count) == (True, True, 1)
        assert (anonymous.has_liked, anonymous.has_bookmarked, anonymous.like_count) == (False, False, 1)

    def test_user_listings(self, queries, session):
        author = UserFactory()
        top = PostFactory(author=author)
        reply = PostFactory(author=author, reply_to=PostFactory())
        session.commit()

        assert [p.id for p in queries.get_user_posts(author.username, None).items] == [top.id]
        assert [p.id for p in queries.get_user_replies(author.username, None).items] == [reply.id]
        with pytest.raises(NotFoundError):
            queries.get_user_posts("nobody-here", None)

    def test_replies_oldest_first(self, queries, session):
        parent = PostFactory()
        early = PostFactory(reply_to=parent)
        late = PostFactory(reply_to=parent)
        session.commit()

        assert [p.id for p in queries.get_post_replies(parent.id, None).items] == [early.id, late.id]

    def test_liked_posts_and_bookmarks(self, queries, session):
        fan = UserFactory()
        session.commit()
        liked, saved = PostFactory(), PostFactory()
        session.commit()
        InteractionService().like(liked.id, fan.id)
        InteractionService().bookmark(saved.id, fan.id)

        assert [p.id for p in queries.get_user_liked_posts(fan.username, None).items] == [liked.id]
        bookmarks = queries.get_user_bookmarks(fan.id)
        assert [p.id for p in bookmarks.items] == [saved.id]
        assert bookmarks.items[0].has_bookmarked is True

    def test_pagination_window(self, queries, session):
        PostFactory.create_batch(5)
        session.commit()

        page = queries.get_posts(None, limit=2, offset=4)

        assert (page.total, len(page.items), page.has_next) == (5, 1, False)
