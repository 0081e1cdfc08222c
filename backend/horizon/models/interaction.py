"""Ledger tables recording per-(user, post) membership."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from horizon.core.extensions import db

from .base import utcnow


class _LedgerMixin:
    """Composite ``(user_id, post_id)`` key with a creation timestamp.

    The primary key is the idempotency guard: a second row for the same pair
    cannot exist.
    """

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} user_id={self.user_id} post_id={self.post_id}>"


class Like(_LedgerMixin, db.Model):
    """A user liked a post. ``posts.like_count`` mirrors the row count."""

    __tablename__ = "likes"
    __table_args__ = (Index("ix_likes_post_id", "post_id"),)


class Bookmark(_LedgerMixin, db.Model):
    """A user saved a post for later. No counter is derived from it."""

    __tablename__ = "bookmarks"
    __table_args__ = (Index("ix_bookmarks_post_id", "post_id"),)
