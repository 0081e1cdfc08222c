"""Directed follow edges between users."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from horizon.core.extensions import db

from .base import utcnow


class Follow(db.Model):
    """
    Follow edge ``follower -> followed``.

    States
    ------
    pending
        ``is_accepted`` is ``False``; written when the followed account is
        private.
    accepted
        ``is_accepted`` is ``True``; counts towards follower/following totals.

    Unfollowing deletes the row whatever its state.
    """

    __tablename__ = "follows"

    follower_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    followed_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    is_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("follower_id <> followed_id", name="no_self_follow"),
        Index("ix_follows_followed_id", "followed_id"),
    )

    def accept(self) -> bool:
        """Move a pending edge to accepted. Returns ``False`` if it already was."""
        if self.is_accepted:
            return False
        self.is_accepted = True
        return True

    def __repr__(self) -> str:
        state = "accepted" if self.is_accepted else "pending"
        return f"<Follow {self.follower_id}->{self.followed_id} {state}>"
