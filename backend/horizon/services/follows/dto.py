# horizon/services/follows/dto.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class FollowIn:
    """
    Input DTO for follow/unfollow/accept.

    :param follower_id: User at the tail of the edge.
    :type follower_id: uuid.UUID
    :param followed_id: User at the head of the edge.
    :type followed_id: uuid.UUID
    """

    follower_id: uuid.UUID
    followed_id: uuid.UUID


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class FollowOut:
    """State of one follow edge."""

    follower_id: uuid.UUID
    followed_id: uuid.UUID
    is_accepted: bool
    created_at: datetime


@dataclass(frozen=True, slots=True)
class FollowStatusOut:
    """
    Relationship between two users as seen from the first one.

    :param is_following: An edge exists, pending or accepted.
    :type is_following: bool
    :param is_accepted: The edge exists and is accepted.
    :type is_accepted: bool
    """

    is_following: bool
    is_accepted: bool


@dataclass(frozen=True, slots=True)
class UserFollowOut:
    """A follower, followed user or requester, with the time the edge was created."""

    id: uuid.UUID
    username: str
    display_name: str | None
    avatar_url: str | None
    is_private: bool
    created_at: datetime
    followed_at: datetime
