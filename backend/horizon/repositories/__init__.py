"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from horizon.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from horizon.repositories.follow import FollowRepository
from horizon.repositories.interaction import BookmarkRepository, LedgerRepository, LikeRepository
from horizon.repositories.notification import NotificationRepository
from horizon.repositories.post import PostRepository
from horizon.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "Pagination",
    "apply_sorting",
    "paginate_select",
    # Domain
    "BookmarkRepository",
    "FollowRepository",
    "LedgerRepository",
    "LikeRepository",
    "NotificationRepository",
    "PostRepository",
    "UserRepository",
]
