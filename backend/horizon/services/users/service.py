"""User profile services."""

from __future__ import annotations

import logging
import uuid

from horizon.repositories.user import UserRepository
from horizon.services._shared.base import BaseService
from horizon.services._shared.errors import InvalidArgumentError, NotFoundError

from ._converters import user_to_out, user_to_profile
from .dto import ProfileOut, ProfileUpdateIn, UserOut

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Read and edit user profiles."""

    def get_by_id(self, user_id: uuid.UUID) -> UserOut:
        """
        Fetch a live account by id.

        :raises NotFoundError: If the user is absent or soft-deleted.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_live(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user_to_out(user)

    def get_profile(self, username: str) -> ProfileOut:
        """
        Public profile by username, with follower and following counts
        derived from accepted follow edges.

        :raises NotFoundError: If no live user has that username.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_username(username)
            if user is None:
                raise NotFoundError("User", username)
            return user_to_profile(
                user,
                follower_count=repo.count_followers(user.id),
                following_count=repo.count_following(user.id),
            )

    def update_profile(self, dto: ProfileUpdateIn) -> UserOut:
        """Apply the non-``None`` fields of ``dto`` to the caller's own profile."""
        actor_id = self.require_actor(dto.actor_id)
        updates = {
            key: value
            for key, value in (
                ("display_name", dto.display_name),
                ("bio", dto.bio),
                ("location", dto.location),
                ("website", dto.website),
                ("is_private", dto.is_private),
            )
            if value is not None
        }
        return self._update(actor_id, updates)

    def update_avatar(self, actor_id: uuid.UUID, avatar_url: str) -> UserOut:
        """Store an opaque avatar URL produced by the media upload collaborator."""
        url = (avatar_url or "").strip()
        if not url:
            raise InvalidArgumentError("avatar_url must not be empty.")
        return self._update(self.require_actor(actor_id), {"avatar_url": url})

    def _update(self, actor_id: uuid.UUID, updates: dict[str, object]) -> UserOut:
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_live_for_update(actor_id)
            if user is None:
                raise NotFoundError("User", actor_id)
            if updates:
                repo.assign_updates(user, updates)
            logger.info("Profile updated", extra={"user_id": user.id, "fields": sorted(updates)})
            return user_to_out(user)
