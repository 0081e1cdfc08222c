"""Convenience exports for request/response schemas."""

from __future__ import annotations

from .auth import LoginSchema, RefreshSchema, RegisterSchema, TokenPairSchema
from .common import AuthorSchema, MetaSchema, PaginationQuerySchema, build_meta
from .notification import NotificationSchema, UnreadCountSchema
from .post import LikeStateSchema, PostCreateSchema, PostSchema, PostUpdateSchema
from .user import (
    AvatarSchema,
    FollowSchema,
    FollowStatusSchema,
    ProfileSchema,
    ProfileUpdateSchema,
    UserFollowSchema,
    UserSchema,
)

__all__ = [
    "LoginSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "AuthorSchema",
    "MetaSchema",
    "PaginationQuerySchema",
    "build_meta",
    "NotificationSchema",
    "UnreadCountSchema",
    "LikeStateSchema",
    "PostCreateSchema",
    "PostSchema",
    "PostUpdateSchema",
    "AvatarSchema",
    "FollowSchema",
    "FollowStatusSchema",
    "ProfileSchema",
    "ProfileUpdateSchema",
    "UserFollowSchema",
    "UserSchema",
]
