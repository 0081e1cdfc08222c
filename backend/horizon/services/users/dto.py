# horizon/services/users/dto.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial profile update. ``None`` leaves a field untouched.

    :param actor_id: Authenticated user editing their own profile.
    :type actor_id: uuid.UUID
    """

    actor_id: uuid.UUID
    display_name: str | None = None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    is_private: bool | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Account view returned to the account owner (includes the email).

    :param id: User id.
    :param username: Public handle.
    :param email: Normalized email.
    :param display_name: Display name.
    :param bio: Free-text biography.
    :param avatar_url: Opaque avatar URL.
    :param location: Free-text location.
    :param website: Free-text website.
    :param is_private: Whether new followers need approval.
    :param email_verified: Whether the email was verified.
    :param created_at: Account creation time.
    """

    id: uuid.UUID
    username: str
    email: str
    display_name: str | None
    bio: str | None
    avatar_url: str | None
    location: str | None
    website: str | None
    is_private: bool
    email_verified: bool
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ProfileOut:
    """Public profile with derived follow counts."""

    id: uuid.UUID
    username: str
    display_name: str | None
    bio: str | None
    avatar_url: str | None
    location: str | None
    website: str | None
    is_private: bool
    created_at: datetime
    follower_count: int
    following_count: int
