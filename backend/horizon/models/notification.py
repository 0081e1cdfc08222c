"""Notifications derived from likes, replies, reposts and follows."""

from __future__ import annotations

import enum
import uuid

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from horizon.core.extensions import db

from .base import ReprMixin, SoftDeleteMixin, TimestampMixin, UUIDPKMixin
from .post import Post
from .user import User


class NotificationType(str, enum.Enum):
    """Kinds of events a user can be notified about."""

    LIKE = "like"
    REPOST = "repost"
    REPLY = "reply"
    FOLLOW = "follow"


class Notification(UUIDPKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    A notification addressed to ``user_id`` about something ``actor_id`` did.

    ``post_id`` points at the liked post or the new reply; ``parent_post_id``
    at the post being replied to. Only ``read`` changes after creation.
    """

    __tablename__ = "notifications"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    actor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    post_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True
    )
    parent_post_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True
    )
    type: Mapped[NotificationType] = mapped_column(
        Enum(
            NotificationType,
            name="notification_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    actor: Mapped[User] = relationship(User, foreign_keys=[actor_id])
    post: Mapped[Post | None] = relationship(Post, foreign_keys=[post_id])
    parent_post: Mapped[Post | None] = relationship(Post, foreign_keys=[parent_post_id])

    __table_args__ = (Index("ix_notifications_user_id_read", "user_id", "read"),)
