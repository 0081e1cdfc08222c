"""Follow graph: the absent -> pending -> accepted edge state machine."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError

from horizon.models.follow import Follow
from horizon.models.notification import NotificationType
from horizon.models.user import User
from horizon.repositories.base import Page
from horizon.repositories.follow import FollowRepository
from horizon.services._shared.base import BaseService, ServiceContext
from horizon.services._shared.dto import PageOut
from horizon.services._shared.errors import AlreadyExistsError, InvalidArgumentError, NotFoundError
from horizon.services.notifications.fanout import NotificationFanout

from .dto import FollowIn, FollowOut, FollowStatusOut, UserFollowOut

logger = logging.getLogger(__name__)


def _edge_to_out(edge: Follow) -> FollowOut:
    return FollowOut(
        follower_id=edge.follower_id,
        followed_id=edge.followed_id,
        is_accepted=edge.is_accepted,
        created_at=edge.created_at,
    )


def _rows_to_page(page: Page[tuple[User, Follow]]) -> PageOut[UserFollowOut]:
    return PageOut(
        items=[
            UserFollowOut(
                id=user.id,
                username=user.username,
                display_name=user.display_name,
                avatar_url=user.avatar_url,
                is_private=user.is_private,
                created_at=user.created_at,
                followed_at=edge.created_at,
            )
            for user, edge in page.items
        ],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


class FollowService(BaseService):
    """
    Orchestrate follow edges between users.

    Acceptance policy: an edge towards a public account is written accepted;
    towards a private account it is written pending until the followed user
    accepts it.
    """

    def __init__(
        self, *, ctx: ServiceContext | None = None, notifier: NotificationFanout | None = None
    ) -> None:
        super().__init__(ctx=ctx)
        self.notifier = notifier or NotificationFanout(ctx=self.ctx)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def follow(self, dto: FollowIn) -> FollowOut:
        """
        Create the edge ``follower -> followed``.

        :raises InvalidArgumentError: On self-follow (checked before any query).
        :raises NotFoundError: If either user is absent or soft-deleted.
        :raises AlreadyExistsError: If an edge already exists in any state.
        """
        follower_id = self.require_actor(dto.follower_id)
        if follower_id == dto.followed_id:
            raise InvalidArgumentError("Users cannot follow themselves.")

        with self.rw_uow() as uow:
            repo: FollowRepository = uow.follows
            followed = uow.users.get_live(dto.followed_id)
            if followed is None:
                raise NotFoundError("User", dto.followed_id)
            if uow.users.get_live(follower_id) is None:
                raise NotFoundError("User", follower_id)

            if repo.get_edge(follower_id, dto.followed_id) is not None:
                raise AlreadyExistsError("Follow", "already exists")

            try:
                edge = repo.add(
                    Follow(
                        follower_id=follower_id,
                        followed_id=dto.followed_id,
                        is_accepted=not followed.is_private,
                    )
                )
            except IntegrityError as exc:
                raise AlreadyExistsError("Follow", "already exists") from exc

            out = _edge_to_out(edge)
            logger.info(
                "Follow created",
                extra={
                    "follower_id": follower_id,
                    "followed_id": dto.followed_id,
                    "accepted": out.is_accepted,
                },
            )

        self.notifier.notify(
            recipient_id=dto.followed_id, actor_id=follower_id, type=NotificationType.FOLLOW
        )
        return out

    def unfollow(self, dto: FollowIn) -> None:
        """
        Delete the edge whatever its state.

        :raises NotFoundError: If no edge existed.
        """
        follower_id = self.require_actor(dto.follower_id)
        with self.rw_uow() as uow:
            removed = uow.follows.remove_edge(follower_id, dto.followed_id)
            if removed == 0:
                raise NotFoundError("Follow", f"{follower_id}->{dto.followed_id}")
            logger.info(
                "Follow removed",
                extra={"follower_id": follower_id, "followed_id": dto.followed_id},
            )

    def accept_follow_request(self, dto: FollowIn) -> FollowOut:
        """
        Move a pending edge to accepted. Accepting twice is a no-op.

        The caller must be the followed user, i.e. ``dto.followed_id``.

        :raises NotFoundError: If there is no edge.
        """
        followed_id = self.require_actor(dto.followed_id)
        with self.rw_uow() as uow:
            repo: FollowRepository = uow.follows
            edge = repo.get_edge_for_update(dto.follower_id, followed_id)
            if edge is None:
                raise NotFoundError("Follow", f"{dto.follower_id}->{followed_id}")
            if edge.accept():
                repo.flush()
                logger.info(
                    "Follow request accepted",
                    extra={"follower_id": dto.follower_id, "followed_id": followed_id},
                )
            return _edge_to_out(edge)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_follow_status(self, user_id: uuid.UUID | None, other_id: uuid.UUID) -> FollowStatusOut:
        """Whether ``user_id`` follows ``other_id``; anonymous or same user is ``(False, False)``."""
        if user_id is None or user_id == other_id:
            return FollowStatusOut(is_following=False, is_accepted=False)

        with self.ro_uow() as uow:
            edge = uow.follows.get_edge(user_id, other_id)
            if edge is None:
                return FollowStatusOut(is_following=False, is_accepted=False)
            return FollowStatusOut(is_following=True, is_accepted=edge.is_accepted)

    def get_followers(
        self, user_id: uuid.UUID, *, limit: int | None = None, offset: int | None = None
    ) -> PageOut[UserFollowOut]:
        """Accepted followers of ``user_id``, newest edge first."""
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            if uow.users.get_live(user_id) is None:
                raise NotFoundError("User", user_id)
            return _rows_to_page(uow.follows.list_followers(user_id, pagination))

    def get_following(
        self, user_id: uuid.UUID, *, limit: int | None = None, offset: int | None = None
    ) -> PageOut[UserFollowOut]:
        """Users ``user_id`` follows with an accepted edge, newest edge first."""
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            if uow.users.get_live(user_id) is None:
                raise NotFoundError("User", user_id)
            return _rows_to_page(uow.follows.list_following(user_id, pagination))

    def get_pending_requests(
        self, user_id: uuid.UUID, *, limit: int | None = None, offset: int | None = None
    ) -> PageOut[UserFollowOut]:
        """Users waiting for the caller to accept their follow request."""
        actor_id = self.require_actor(user_id)
        pagination = self.ensure_pagination(limit=limit, offset=offset)
        with self.ro_uow() as uow:
            return _rows_to_page(
                uow.follows.list_followers(actor_id, pagination, accepted=False)
            )
