"""Follow-edge repository."""

from __future__ import annotations

import uuid
from typing import cast

from sqlalchemy import delete, select

from horizon.models.follow import Follow
from horizon.models.user import User
from horizon.repositories.base import BaseRepository, Page, Pagination, paginate_select


class FollowRepository(BaseRepository[Follow]):
    """Persistence-only repository for :class:`Follow` edges.

    Listings return ``(User, Follow)`` rows so callers can expose both the
    counterpart's profile and the time the edge was created.
    """

    model = Follow

    def _pk_attr(self):
        return None

    def get_edge(self, follower_id: uuid.UUID, followed_id: uuid.UUID) -> Follow | None:
        stmt = select(Follow).where(
            Follow.follower_id == follower_id, Follow.followed_id == followed_id
        )
        return cast(Follow | None, self.session.execute(stmt).scalars().first())

    def get_edge_for_update(
        self, follower_id: uuid.UUID, followed_id: uuid.UUID
    ) -> Follow | None:
        """Fetch the edge holding a row lock for the rest of the transaction."""
        stmt = (
            select(Follow)
            .where(Follow.follower_id == follower_id, Follow.followed_id == followed_id)
            .with_for_update()
        )
        return cast(Follow | None, self.session.execute(stmt).scalars().first())

    def remove_edge(self, follower_id: uuid.UUID, followed_id: uuid.UUID) -> int:
        """Delete the edge in whatever state it is. Returns rows removed."""
        stmt = (
            delete(Follow)
            .where(Follow.follower_id == follower_id, Follow.followed_id == followed_id)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    # ------------------------------ Listings ---------------------------------

    def _page(self, stmt, pagination: Pagination) -> Page[tuple[User, Follow]]:
        stmt = stmt.where(User.deleted_at.is_(None)).order_by(
            Follow.created_at.desc(), User.id.asc()
        )
        rows, total = paginate_select(self.session, stmt, pagination, scalars=False)
        return Page(items=rows, total=total, limit=pagination.limit, offset=pagination.offset)

    def list_followers(
        self, user_id: uuid.UUID, pagination: Pagination, *, accepted: bool = True
    ) -> Page[tuple[User, Follow]]:
        """Users following ``user_id``; ``accepted=False`` lists pending requests."""
        stmt = (
            select(User, Follow)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.followed_id == user_id, Follow.is_accepted.is_(accepted))
        )
        return self._page(stmt, pagination)

    def list_following(
        self, user_id: uuid.UUID, pagination: Pagination
    ) -> Page[tuple[User, Follow]]:
        """Users that ``user_id`` follows with an accepted edge."""
        stmt = (
            select(User, Follow)
            .join(Follow, Follow.followed_id == User.id)
            .where(Follow.follower_id == user_id, Follow.is_accepted.is_(True))
        )
        return self._page(stmt, pagination)
