"""Notification persistence and recipient-scoped reads."""

from __future__ import annotations

import logging
import uuid

from horizon.repositories.notification import NotificationRepository
from horizon.services._shared.base import BaseService
from horizon.services._shared.dto import PageOut
from horizon.services._shared.errors import InvalidArgumentError, NotFoundError

from ._converters import notification_to_out
from .dto import NotificationCreateIn, NotificationOut

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """
    Create and read notifications.

    Every read and write other than :meth:`create` is scoped to the calling
    user; a notification addressed to someone else behaves as if it did not
    exist.
    """

    def create(self, dto: NotificationCreateIn) -> NotificationOut:
        """
        Persist a notification in its own transaction.

        :raises InvalidArgumentError: If recipient and actor are the same user.
        :raises NotFoundError: If the recipient or the actor does not exist.
        """
        if dto.recipient_id == dto.actor_id:
            raise InvalidArgumentError("Users are not notified about their own actions.")

        with self.rw_uow() as uow:
            if uow.users.get_live(dto.recipient_id) is None:
                raise NotFoundError("User", dto.recipient_id)
            if uow.users.get_live(dto.actor_id) is None:
                raise NotFoundError("User", dto.actor_id)

            repo: NotificationRepository = uow.notifications
            notification = repo.add(
                repo.model(
                    user_id=dto.recipient_id,
                    actor_id=dto.actor_id,
                    type=dto.type,
                    post_id=dto.post_id,
                    parent_post_id=dto.parent_post_id,
                )
            )
            logger.info(
                "Notification created",
                extra={
                    "notification_id": notification.id,
                    "recipient_id": dto.recipient_id,
                    "type": dto.type.value,
                },
            )
            return notification_to_out(notification)

    def list_for_user(
        self, user_id: uuid.UUID, *, limit: int | None = None, offset: int | None = None
    ) -> PageOut[NotificationOut]:
        """Caller's live notifications, newest first, with actor and post content."""
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            page = uow.notifications.list_for_recipient(self.require_actor(user_id), pagination)
            return PageOut(
                items=[notification_to_out(n) for n in page.items],
                total=page.total,
                limit=page.limit,
                offset=page.offset,
            )

    def unread_count(self, user_id: uuid.UUID) -> int:
        with self.ro_uow() as uow:
            return uow.notifications.count_unread(self.require_actor(user_id))

    def mark_as_read(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> NotificationOut:
        """
        Flag one notification as read.

        :raises NotFoundError: If it does not exist or belongs to someone else.
        """
        with self.rw_uow() as uow:
            repo: NotificationRepository = uow.notifications
            notification = repo.get_owned(notification_id, self.require_actor(user_id))
            if notification is None:
                raise NotFoundError("Notification", notification_id)
            if not notification.read:
                notification.read = True
                repo.flush()
            return notification_to_out(notification)

    def mark_all_as_read(self, user_id: uuid.UUID) -> int:
        """Flag every unread notification of the caller. Returns how many changed."""
        with self.rw_uow() as uow:
            changed = uow.notifications.mark_all_read(self.require_actor(user_id))
            logger.info("Notifications marked read", extra={"user_id": user_id, "count": changed})
            return changed

    def delete(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Soft-delete one of the caller's notifications."""
        with self.rw_uow() as uow:
            repo: NotificationRepository = uow.notifications
            notification = repo.get_owned(notification_id, self.require_actor(user_id))
            if notification is None:
                raise NotFoundError("Notification", notification_id)
            repo.delete(notification)
