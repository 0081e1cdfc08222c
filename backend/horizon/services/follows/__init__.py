"""Follow graph service layer."""

from __future__ import annotations

from .dto import FollowIn, FollowOut, FollowStatusOut, UserFollowOut
from .service import FollowService

__all__ = ["FollowIn", "FollowOut", "FollowService", "FollowStatusOut", "UserFollowOut"]
