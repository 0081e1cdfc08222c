from __future__ import annotations

import logging
import uuid

from horizon.models.notification import NotificationType
from horizon.repositories.post import PostRepository
from horizon.services._shared.base import BaseService, ServiceContext
from horizon.services._shared.errors import InvalidArgumentError, NotFoundError
from horizon.services._shared.policies.common import can_view_post
from horizon.services.notifications.fanout import NotificationFanout

from ._converters import annotate_posts
from .dto import PostCreateIn, PostOut, PostUpdateIn

logger = logging.getLogger(__name__)


class PostCommandService(BaseService):
    """Create, edit and soft-delete posts.

    Ownership and existence are checked on the row re-read under lock in the
    same transaction as the write they guard.
    """

    def __init__(
        self, *, ctx: ServiceContext | None = None, notifier: NotificationFanout | None = None
    ) -> None:
        super().__init__(ctx=ctx)
        self.notifier = notifier or NotificationFanout(ctx=self.ctx)

    def create(self, dto: PostCreateIn) -> PostOut:
        """Publish a post, or a reply when ``reply_to_post_id`` is set.

        Reply counts are derived on read, so the parent row is not written.
        """
        author_id = self.require_actor(dto.author_id)
        content = self.require_content(dto.content)
        parent_author_id: uuid.UUID | None = None

        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            if uow.users.get_live(author_id) is None:
                raise NotFoundError("User", author_id)

            if dto.reply_to_post_id is not None:
                parent = repo.get_visible(dto.reply_to_post_id)
                if parent is None or not can_view_post(
                    viewer_id=author_id, author_id=parent.user_id, is_private=parent.is_private
                ):
                    raise NotFoundError("Post", dto.reply_to_post_id)
                if not parent.allow_replies:
                    raise InvalidArgumentError("This post does not accept replies.")
                parent_author_id = parent.user_id

            post = repo.add(
                repo.model(
                    user_id=author_id,
                    content=content,
                    is_private=dto.is_private,
                    reply_to_post_id=dto.reply_to_post_id,
                    allow_replies=dto.allow_replies,
                    media_urls=[str(url) for url in dto.media_urls],
                )
            )
            logger.info(
                "Post created",
                extra={"post_id": post.id, "user_id": author_id, "reply_to": dto.reply_to_post_id},
            )
            (out,) = annotate_posts(uow, [post], author_id)

        if parent_author_id is not None:
            self.notifier.notify(
                recipient_id=parent_author_id,
                actor_id=author_id,
                type=NotificationType.REPLY,
                post_id=out.id,
                parent_post_id=dto.reply_to_post_id,
            )
        return out

    def update_content(self, dto: PostUpdateIn) -> PostOut:
        """
        Replace the text of a post owned by the caller.

        :raises NotFoundError: If the post is absent or deleted.
        :raises AuthorizationError: If the caller is not the author.
        :raises InvalidArgumentError: If the new content is blank.
        """
        actor_id = self.require_actor(dto.actor_id)
        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            post = repo.get_live_for_update(dto.post_id)
            if post is None:
                raise NotFoundError("Post", dto.post_id)
            self.ensure_owner(actor_id, post.user_id, msg="Only the author can edit this post.")
            repo.assign_updates(post, {"content": self.require_content(dto.content)})
            logger.info("Post updated", extra={"post_id": post.id, "user_id": actor_id})
            (out,) = annotate_posts(uow, [post], actor_id)
            return out

    def delete(self, post_id: uuid.UUID, actor_id: uuid.UUID) -> None:
        """
        Soft-delete a post owned by the caller. Replies and likes keep
        pointing at the row.

        :raises NotFoundError: If the post is absent or already deleted.
        :raises AuthorizationError: If the caller is not the author.
        """
        actor = self.require_actor(actor_id)
        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            post = repo.get_live_for_update(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)
            self.ensure_owner(actor, post.user_id, msg="Only the author can delete this post.")
            repo.delete(post)
            logger.info("Post deleted", extra={"post_id": post_id, "user_id": actor})
