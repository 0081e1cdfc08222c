"""Posts service layer: commands, queries and like/bookmark interactions."""

from __future__ import annotations

from .command import PostCommandService
from .dto import LikeStateOut, PostCreateIn, PostOut, PostUpdateIn
from .interactions import InteractionService
from .query import PostQueryService

__all__ = [
    "InteractionService",
    "PostCommandService",
    "PostQueryService",
    # DTOs
    "LikeStateOut",
    "PostCreateIn",
    "PostOut",
    "PostUpdateIn",
]
