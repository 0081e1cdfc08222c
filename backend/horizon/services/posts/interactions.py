from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError

from horizon.models.notification import NotificationType
from horizon.models.post import Post
from horizon.services._shared.base import BaseService, ServiceContext
from horizon.services._shared.errors import AlreadyExistsError, NotFoundError
from horizon.services._shared.policies.common import can_view_post
from horizon.services.notifications.fanout import NotificationFanout
from horizon.uow.sqlalchemy_uow import SQLAlchemyRepositoryContainer

from .dto import LikeStateOut

logger = logging.getLogger(__name__)


class InteractionService(BaseService):
    """
    Likes and bookmarks.

    A like writes the ledger row and moves ``posts.like_count`` in the same
    transaction, with the post row locked, so the counter always equals the
    number of ledger rows. Bookmarks follow the same discipline without a
    counter.
    """

    def __init__(
        self, *, ctx: ServiceContext | None = None, notifier: NotificationFanout | None = None
    ) -> None:
        super().__init__(ctx=ctx)
        self.notifier = notifier or NotificationFanout(ctx=self.ctx)

    @staticmethod
    def _lock_visible_post(
        uow: SQLAlchemyRepositoryContainer, post_id: uuid.UUID, user_id: uuid.UUID
    ) -> Post:
        post = uow.posts.get_visible_for_update(post_id)
        if post is None or not can_view_post(
            viewer_id=user_id, author_id=post.user_id, is_private=post.is_private
        ):
            raise NotFoundError("Post", post_id)
        return post

    # ------------------------------------------------------------------ #
    # Likes
    # ------------------------------------------------------------------ #

    def like(self, post_id: uuid.UUID, user_id: uuid.UUID) -> LikeStateOut:
        """
        Record a like and increment the counter by exactly one.

        :raises NotFoundError: If the post is absent, deleted or not visible.
        :raises AlreadyExistsError: If the user already liked the post.
        """
        actor_id = self.require_actor(user_id)
        with self.rw_uow() as uow:
            post = self._lock_visible_post(uow, post_id, actor_id)
            if uow.likes.contains(actor_id, post_id):
                raise AlreadyExistsError("Like", "already exists")
            try:
                uow.likes.record(actor_id, post_id)
            except IntegrityError as exc:
                raise AlreadyExistsError("Like", "already exists") from exc
            like_count = uow.posts.increment_like_count(post)
            author_id = post.user_id
            logger.info(
                "Post liked", extra={"post_id": post_id, "user_id": actor_id, "like_count": like_count}
            )

        self.notifier.notify(
            recipient_id=author_id,
            actor_id=actor_id,
            type=NotificationType.LIKE,
            post_id=post_id,
        )
        return LikeStateOut(post_id=post_id, like_count=like_count, has_liked=True)

    def unlike(self, post_id: uuid.UUID, user_id: uuid.UUID) -> LikeStateOut:
        """
        Remove a like. The counter only moves when a ledger row was deleted,
        so unliking something never liked is a no-op.

        :raises NotFoundError: If the post is absent, deleted or not visible.
        """
        actor_id = self.require_actor(user_id)
        with self.rw_uow() as uow:
            post = self._lock_visible_post(uow, post_id, actor_id)
            removed = uow.likes.remove(actor_id, post_id)
            like_count = post.like_count
            if removed:
                like_count = uow.posts.decrement_like_count(post)
                logger.info(
                    "Post unliked",
                    extra={"post_id": post_id, "user_id": actor_id, "like_count": like_count},
                )
            return LikeStateOut(post_id=post_id, like_count=like_count, has_liked=False)

    def has_liked(self, post_id: uuid.UUID, user_id: uuid.UUID | None) -> bool:
        """Membership check; ``False`` for anonymous callers, never an error."""
        if user_id is None:
            return False
        with self.ro_uow() as uow:
            return uow.likes.contains(user_id, post_id)

    # ------------------------------------------------------------------ #
    # Bookmarks
    # ------------------------------------------------------------------ #

    def bookmark(self, post_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """
        Save a post for later.

        :raises NotFoundError: If the post is absent, deleted or not visible.
        :raises AlreadyExistsError: If it is already bookmarked.
        """
        actor_id = self.require_actor(user_id)
        with self.rw_uow() as uow:
            self._lock_visible_post(uow, post_id, actor_id)
            if uow.bookmarks.contains(actor_id, post_id):
                raise AlreadyExistsError("Bookmark", "already exists")
            try:
                uow.bookmarks.record(actor_id, post_id)
            except IntegrityError as exc:
                raise AlreadyExistsError("Bookmark", "already exists") from exc
            logger.info("Post bookmarked", extra={"post_id": post_id, "user_id": actor_id})

    def unbookmark(self, post_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """
        Remove a bookmark.

        :raises NotFoundError: If the post was never bookmarked by the caller.
        """
        actor_id = self.require_actor(user_id)
        with self.rw_uow() as uow:
            if uow.bookmarks.remove(actor_id, post_id) == 0:
                raise NotFoundError("Bookmark", post_id)
            logger.info("Bookmark removed", extra={"post_id": post_id, "user_id": actor_id})

    def has_bookmarked(self, post_id: uuid.UUID, user_id: uuid.UUID | None) -> bool:
        if user_id is None:
            return False
        with self.ro_uow() as uow:
            return uow.bookmarks.contains(user_id, post_id)
