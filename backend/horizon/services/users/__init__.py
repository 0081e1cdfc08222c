"""User profile service layer."""

from __future__ import annotations

from .dto import ProfileOut, ProfileUpdateIn, UserOut
from .service import UserService

__all__ = ["ProfileOut", "ProfileUpdateIn", "UserOut", "UserService"]
