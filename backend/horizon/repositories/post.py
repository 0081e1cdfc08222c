"""Post repository: timelines, reply threads and the like counter."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.orm import joinedload

from horizon.models.interaction import Bookmark, Like
from horizon.models.post import Post
from horizon.models.user import User
from horizon.repositories.base import BaseRepository, Page, Pagination, paginate_select

NEWEST_FIRST = ("-created_at",)
OLDEST_FIRST = ("created_at",)


class PostRepository(BaseRepository[Post]):
    """Persistence-only repository for :class:`Post`.

    Listing methods return live posts by live authors only, and hide private
    posts from everybody except their author.
    """

    model = Post

    def _sortable_fields(self):
        return {"created_at": Post.created_at, "like_count": Post.like_count}

    def _updatable_fields(self):
        return {"content"}

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.options(joinedload(Post.author))

    # ------------------------------ Filters ----------------------------------

    @staticmethod
    def _privacy(viewer_id: uuid.UUID | None) -> Any:
        if viewer_id is None:
            return Post.is_private.is_(False)
        return or_(Post.is_private.is_(False), Post.user_id == viewer_id)

    @staticmethod
    def _live_author(stmt: Select[Any]) -> Select[Any]:
        return stmt.join(User, User.id == Post.user_id).where(
            Post.deleted_at.is_(None), User.deleted_at.is_(None)
        )

    def _listing(self, viewer_id: uuid.UUID | None) -> Select[Any]:
        """Base select for public listings as seen by ``viewer_id``."""
        stmt = self._live_author(select(Post)).options(joinedload(Post.author))
        return stmt.where(self._privacy(viewer_id))

    # ------------------------------ Lookups ----------------------------------

    def get_visible(self, post_id: uuid.UUID) -> Post | None:
        """Live post by a live author; privacy is left to the caller."""
        stmt = self._live_author(self._by_pk(post_id))
        return self.session.execute(stmt).scalars().first()

    def get_visible_for_update(self, post_id: uuid.UUID) -> Post | None:
        """:meth:`get_visible` with a ``FOR UPDATE`` lock on the post row."""
        stmt = self._live_author(self._by_pk(post_id)).with_for_update(of=Post)
        return self.session.execute(stmt).scalars().first()

    # ------------------------------ Listings ---------------------------------

    def list_timeline(self, viewer_id: uuid.UUID | None, pagination: Pagination) -> Page[Post]:
        """Top-level posts from everyone, newest first."""
        stmt = self._listing(viewer_id).where(Post.reply_to_post_id.is_(None))
        return self.paginate(stmt, pagination, sort=NEWEST_FIRST)

    def list_by_author(
        self,
        author_id: uuid.UUID,
        viewer_id: uuid.UUID | None,
        pagination: Pagination,
        *,
        replies: bool = False,
    ) -> Page[Post]:
        """Posts written by ``author_id``; either top-level posts or replies.

        :param author_id: Owner of the posts.
        :param viewer_id: Caller, used for private-post visibility.
        :param pagination: Window to fetch.
        :param replies: ``True`` to list the author's replies instead.
        """
        parent = Post.reply_to_post_id.is_not(None) if replies else Post.reply_to_post_id.is_(None)
        stmt = self._listing(viewer_id).where(Post.user_id == author_id, parent)
        return self.paginate(stmt, pagination, sort=NEWEST_FIRST)

    def list_replies(
        self, parent_id: uuid.UUID, viewer_id: uuid.UUID | None, pagination: Pagination
    ) -> Page[Post]:
        """Live replies to ``parent_id``, oldest first so threads read top-down."""
        stmt = self._listing(viewer_id).where(Post.reply_to_post_id == parent_id)
        return self.paginate(stmt, pagination, sort=OLDEST_FIRST)

    def _list_via_ledger(
        self,
        ledger: type[Like] | type[Bookmark],
        user_id: uuid.UUID,
        viewer_id: uuid.UUID | None,
        pagination: Pagination,
    ) -> Page[Post]:
        stmt = (
            self._listing(viewer_id)
            .join(ledger, ledger.post_id == Post.id)
            .where(ledger.user_id == user_id)
            .order_by(ledger.created_at.desc(), Post.id.asc())
        )
        items, total = paginate_select(self.session, stmt, pagination)
        return Page(items=items, total=total, limit=pagination.limit, offset=pagination.offset)

    def list_liked_by(
        self, user_id: uuid.UUID, viewer_id: uuid.UUID | None, pagination: Pagination
    ) -> Page[Post]:
        """Posts liked by ``user_id``, most recently liked first."""
        return self._list_via_ledger(Like, user_id, viewer_id, pagination)

    def list_bookmarked_by(self, user_id: uuid.UUID, pagination: Pagination) -> Page[Post]:
        """Posts bookmarked by ``user_id``, most recently saved first."""
        return self._list_via_ledger(Bookmark, user_id, user_id, pagination)

    # ------------------------------ Counters ---------------------------------

    def count_replies(
        self, post_ids: Iterable[uuid.UUID], viewer_id: uuid.UUID | None = None
    ) -> dict[uuid.UUID, int]:
        """Count replies for each id in ``post_ids`` with one grouped query.

        Uses the same filters as :meth:`list_replies`, so the count matches
        what ``viewer_id`` can page through.

        :returns: Mapping of post id to reply count; ids without replies are absent.
        :rtype: dict[uuid.UUID, int]
        """
        ids = list(post_ids)
        if not ids:
            return {}
        stmt = (
            self._live_author(select(Post.reply_to_post_id, func.count()))
            .where(Post.reply_to_post_id.in_(ids), self._privacy(viewer_id))
            .group_by(Post.reply_to_post_id)
        )
        return {parent_id: int(n) for parent_id, n in self.session.execute(stmt).all()}

    def increment_like_count(self, post: Post) -> int:
        """Add one to ``post.like_count`` with a single atomic ``UPDATE``.

        :param post: Post already locked by the current transaction.
        :returns: The refreshed counter value.
        :rtype: int
        """
        stmt = (
            update(Post)
            .where(Post.id == post.id)
            .values(like_count=Post.like_count + 1)
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        self.session.refresh(post, attribute_names=["like_count"])
        return post.like_count

    def decrement_like_count(self, post: Post) -> int:
        """Subtract one from ``post.like_count`` without ever going below zero.

        :param post: Post already locked by the current transaction.
        :returns: The refreshed counter value.
        :rtype: int
        """
        stmt = (
            update(Post)
            .where(Post.id == post.id, Post.like_count > 0)
            .values(like_count=Post.like_count - 1)
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        self.session.refresh(post, attribute_names=["like_count"])
        return post.like_count
