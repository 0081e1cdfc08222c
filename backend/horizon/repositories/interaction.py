"""Ledger repositories for likes and bookmarks."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Generic, TypeVar

from sqlalchemy import delete, func, select

from horizon.models.interaction import Bookmark, Like
from horizon.repositories.base import BaseRepository

L = TypeVar("L", Like, Bookmark)


class LedgerRepository(BaseRepository[L], Generic[L]):
    """Membership operations over a ``(user_id, post_id)`` ledger table."""

    def _pk_attr(self):
        return None

    def contains(self, user_id: uuid.UUID, post_id: uuid.UUID) -> bool:
        """Return ``True`` when the pair is recorded."""
        stmt = select(self.model.user_id).where(
            self.model.user_id == user_id, self.model.post_id == post_id
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    def record(self, user_id: uuid.UUID, post_id: uuid.UUID) -> L:
        """Insert the pair and flush.

        :raises sqlalchemy.exc.IntegrityError: If the pair already exists.
        """
        return self.add(self.model(user_id=user_id, post_id=post_id))

    def remove(self, user_id: uuid.UUID, post_id: uuid.UUID) -> int:
        """Delete the pair. Returns the number of rows removed (0 or 1)."""
        stmt = (
            delete(self.model)
            .where(self.model.user_id == user_id, self.model.post_id == post_id)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def post_ids_for(self, user_id: uuid.UUID, post_ids: Iterable[uuid.UUID]) -> set[uuid.UUID]:
        """Subset of ``post_ids`` the user has recorded, in one query."""
        ids = list(post_ids)
        if not ids:
            return set()
        stmt = select(self.model.post_id).where(
            self.model.user_id == user_id, self.model.post_id.in_(ids)
        )
        return set(self.session.execute(stmt).scalars().all())

    def count_for_post(self, post_id: uuid.UUID) -> int:
        """Ground-truth row count for a post; the like counter must equal it."""
        stmt = select(func.count()).select_from(self.model).where(self.model.post_id == post_id)
        return int(self.session.execute(stmt).scalar_one())


class LikeRepository(LedgerRepository[Like]):
    model = Like


class BookmarkRepository(LedgerRepository[Bookmark]):
    model = Bookmark
