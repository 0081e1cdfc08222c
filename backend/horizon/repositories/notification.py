"""Notification repository."""

from __future__ import annotations

import uuid
from typing import Any, cast

from sqlalchemy import Select, func, select, update
from sqlalchemy.orm import joinedload

from horizon.models.notification import Notification
from horizon.repositories.base import BaseRepository, Page, Pagination


class NotificationRepository(BaseRepository[Notification]):
    """Persistence-only repository for :class:`Notification`.

    Every read is scoped to a recipient; nothing here lists another user's
    notifications.
    """

    model = Notification

    def _sortable_fields(self):
        return {"created_at": Notification.created_at}

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.options(
            joinedload(Notification.actor),
            joinedload(Notification.post),
            joinedload(Notification.parent_post),
        )

    def _for_recipient(self, user_id: uuid.UUID) -> Select[Any]:
        return self._live(select(Notification).where(Notification.user_id == user_id))

    def list_for_recipient(self, user_id: uuid.UUID, pagination: Pagination) -> Page[Notification]:
        """Live notifications for ``user_id``, newest first, with actor and posts loaded."""
        stmt = self._default_eagerload(self._for_recipient(user_id))
        return self.paginate(stmt, pagination, sort=("-created_at",))

    def get_owned(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> Notification | None:
        """Fetch a live notification only if ``user_id`` is its recipient."""
        stmt = self._for_recipient(user_id).where(Notification.id == notification_id)
        return cast(Notification | None, self.session.execute(stmt).scalars().first())

    def count_unread(self, user_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
                Notification.deleted_at.is_(None),
            )
        )
        return int(self.session.execute(stmt).scalar_one())

    def mark_all_read(self, user_id: uuid.UUID) -> int:
        """Flip every unread live notification of ``user_id``. Returns rows changed."""
        stmt = (
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
                Notification.deleted_at.is_(None),
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)
