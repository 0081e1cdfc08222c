from __future__ import annotations

from horizon.models.user import User
from horizon.services._shared.dto import AuthorOut

from .dto import ProfileOut, UserOut


def user_to_out(row: User) -> UserOut:
    return UserOut(
        id=row.id,
        username=row.username,
        email=row.email,
        display_name=row.display_name,
        bio=row.bio,
        avatar_url=row.avatar_url,
        location=row.location,
        website=row.website,
        is_private=row.is_private,
        email_verified=row.email_verified,
        created_at=row.created_at,
    )


def user_to_profile(row: User, *, follower_count: int, following_count: int) -> ProfileOut:
    return ProfileOut(
        id=row.id,
        username=row.username,
        display_name=row.display_name,
        bio=row.bio,
        avatar_url=row.avatar_url,
        location=row.location,
        website=row.website,
        is_private=row.is_private,
        created_at=row.created_at,
        follower_count=follower_count,
        following_count=following_count,
    )


def user_to_author(row: User) -> AuthorOut:
    return AuthorOut(
        id=row.id,
        username=row.username,
        display_name=row.display_name,
        avatar_url=row.avatar_url,
    )
