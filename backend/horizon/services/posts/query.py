from __future__ import annotations

import logging
import uuid

from horizon.models.user import User
from horizon.repositories.post import PostRepository
from horizon.services._shared.base import BaseService
from horizon.services._shared.dto import PageOut
from horizon.services._shared.errors import NotFoundError
from horizon.services._shared.policies.common import can_view_post
from horizon.uow.sqlalchemy_uow import SQLAlchemyRepositoryContainer

from ._converters import annotate_posts, page_to_out
from .dto import PostOut

logger = logging.getLogger(__name__)


class PostQueryService(BaseService):
    """Read-only post listings, annotated per viewer.

    ``viewer_id`` is ``None`` for anonymous callers: they only see public
    posts and every ``has_liked``/``has_bookmarked`` flag is ``False``.
    """

    @staticmethod
    def _author(uow: SQLAlchemyRepositoryContainer, username: str) -> User:
        user = uow.users.get_by_username(username)
        if user is None:
            raise NotFoundError("User", username)
        return user

    def get_post(self, post_id: uuid.UUID, viewer_id: uuid.UUID | None) -> PostOut:
        with self.ro_uow() as uow:
            post = uow.posts.get_visible(post_id)
            if post is None or not can_view_post(
                viewer_id=viewer_id, author_id=post.user_id, is_private=post.is_private
            ):
                raise NotFoundError("Post", post_id)
            (out,) = annotate_posts(uow, [post], viewer_id)
            return out

    def get_posts(
        self, viewer_id: uuid.UUID | None, *, limit: int | None = None, offset: int | None = None
    ) -> PageOut[PostOut]:
        """Top-level posts from everyone, newest first."""
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            repo: PostRepository = uow.posts
            return page_to_out(uow, repo.list_timeline(viewer_id, pagination), viewer_id)

    def get_user_posts(
        self,
        username: str,
        viewer_id: uuid.UUID | None,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageOut[PostOut]:
        """Top-level posts written by ``username``, newest first."""
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            author = self._author(uow, username)
            page = uow.posts.list_by_author(author.id, viewer_id, pagination)
            return page_to_out(uow, page, viewer_id)

    def get_user_replies(
        self,
        username: str,
        viewer_id: uuid.UUID | None,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageOut[PostOut]:
        """Replies written by ``username``, newest first."""
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            author = self._author(uow, username)
            page = uow.posts.list_by_author(author.id, viewer_id, pagination, replies=True)
            return page_to_out(uow, page, viewer_id)

    def get_user_liked_posts(
        self,
        username: str,
        viewer_id: uuid.UUID | None,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageOut[PostOut]:
        """Posts ``username`` liked, most recent like first."""
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            user = self._author(uow, username)
            page = uow.posts.list_liked_by(user.id, viewer_id, pagination)
            return page_to_out(uow, page, viewer_id)

    def get_post_replies(
        self,
        post_id: uuid.UUID,
        viewer_id: uuid.UUID | None,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> PageOut[PostOut]:
        """Live replies to a visible post, oldest first."""
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            parent = uow.posts.get_visible(post_id)
            if parent is None or not can_view_post(
                viewer_id=viewer_id, author_id=parent.user_id, is_private=parent.is_private
            ):
                raise NotFoundError("Post", post_id)
            page = uow.posts.list_replies(post_id, viewer_id, pagination)
            return page_to_out(uow, page, viewer_id)

    def get_user_bookmarks(
        self, user_id: uuid.UUID, *, limit: int | None = None, offset: int | None = None
    ) -> PageOut[PostOut]:
        """The caller's bookmarks, most recently saved first."""
        actor_id = self.require_actor(user_id)
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            page = uow.posts.list_bookmarked_by(actor_id, pagination)
            logger.debug("Bookmarks listed", extra={"user_id": actor_id, "total": page.total})
            return page_to_out(uow, page, actor_id)
