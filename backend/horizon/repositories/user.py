"""User repository: credential lookups and profile persistence."""

from __future__ import annotations

import uuid
from typing import cast

from sqlalchemy import func, or_, select

from horizon.models.follow import Follow
from horizon.models.user import User
from horizon.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Lookups ignore soft-deleted accounts. Token handling lives in the auth
    services; this class only reads and writes rows.
    """

    model = User

    def _sortable_fields(self):
        return {"username": User.username, "created_at": User.created_at}

    def _updatable_fields(self):
        """Profile fields a user may change on their own account."""
        return {"display_name", "bio", "location", "website", "avatar_url", "is_private"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> User | None:
        """Fetch a live user by exact (trimmed) username.

        :param username: Public handle.
        :type username: str
        :returns: User or ``None``.
        :rtype: User | None
        """
        stmt = self._live(select(User).where(User.username == username.strip()))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_email(self, email: str) -> User | None:
        """Fetch a live user by email (case-insensitive)."""
        stmt = self._live(select(User).where(User.email == email.strip().lower()))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_login(self, login: str) -> User | None:
        """Fetch the live user whose username or email equals ``login``.

        :param login: Username, or an email address.
        :type login: str
        :returns: Credential-bearing user row or ``None``.
        :rtype: User | None
        """
        value = login.strip()
        stmt = self._live(
            select(User).where(or_(User.username == value, User.email == value.lower()))
        )
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_username(self, username: str) -> bool:
        """Return ``True`` if any account, deleted or not, holds ``username``."""
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt.limit(1)).first() is not None

    def exists_email(self, email: str) -> bool:
        """Return ``True`` if any account, deleted or not, holds ``email``."""
        stmt = select(User.id).where(User.email == email.strip().lower())
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Derived counts ----------------------------

    def count_followers(self, user_id: uuid.UUID) -> int:
        """Count accepted edges pointing at ``user_id``."""
        stmt = select(func.count()).select_from(Follow).where(
            Follow.followed_id == user_id, Follow.is_accepted.is_(True)
        )
        return int(self.session.execute(stmt).scalar_one())

    def count_following(self, user_id: uuid.UUID) -> int:
        """Count accepted edges leaving ``user_id``."""
        stmt = select(func.count()).select_from(Follow).where(
            Follow.follower_id == user_id, Follow.is_accepted.is_(True)
        )
        return int(self.session.execute(stmt).scalar_one())
