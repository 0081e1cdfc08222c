"""Post model: authored content forming reply trees."""

from __future__ import annotations

import uuid

from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from horizon.core.extensions import db

from .base import ReprMixin, SoftDeleteMixin, TimestampMixin, UUIDPKMixin
from .user import User


class Post(UUIDPKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    A post or a reply to another post.

    ``like_count`` is denormalized and always moves in the same transaction as
    the ``likes`` ledger. Reply counts are not stored; readers count live child
    rows instead. ``repost_count`` is carried for clients and stays at zero
    until reposting exists.
    """

    __tablename__ = "posts"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reply_to_post_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="SET NULL"), nullable=True
    )
    allow_replies: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    media_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    repost_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    author: Mapped[User] = relationship(User)

    __table_args__ = (
        CheckConstraint("like_count >= 0", name="like_count_non_negative"),
        CheckConstraint("repost_count >= 0", name="repost_count_non_negative"),
        CheckConstraint(
            "reply_to_post_id IS NULL OR reply_to_post_id <> id", name="not_own_parent"
        ),
        Index("ix_posts_user_id_created_at", "user_id", "created_at"),
        Index("ix_posts_reply_to_post_id", "reply_to_post_id"),
    )

    @property
    def is_reply(self) -> bool:
        return self.reply_to_post_id is not None
