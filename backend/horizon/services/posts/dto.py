# horizon/services/posts/dto.py
from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from horizon.services._shared.dto import AuthorOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class PostCreateIn:
    """
    Input DTO for a new post or reply.

    :param author_id: Authenticated author.
    :type author_id: uuid.UUID
    :param content: Post text; must not be blank.
    :type content: str
    :param is_private: Visible to the author only.
    :type is_private: bool
    :param reply_to_post_id: Parent post when this is a reply.
    :type reply_to_post_id: uuid.UUID | None
    :param media_urls: Opaque URLs returned by the media upload collaborator.
    :type media_urls: Sequence[str]
    :param allow_replies: Whether others may reply to this post.
    :type allow_replies: bool
    """

    author_id: uuid.UUID
    content: str
    is_private: bool = False
    reply_to_post_id: uuid.UUID | None = None
    media_urls: Sequence[str] = field(default_factory=tuple)
    allow_replies: bool = True


@dataclass(frozen=True, slots=True)
class PostUpdateIn:
    """
    Input DTO for editing the text of a post.

    :param post_id: Post to edit.
    :type post_id: uuid.UUID
    :param actor_id: Caller; must own the post.
    :type actor_id: uuid.UUID
    :param content: New text; must not be blank.
    :type content: str
    """

    post_id: uuid.UUID
    actor_id: uuid.UUID
    content: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class PostOut:
    """
    Canonical post view, annotated for one viewer.

    ``has_liked`` and ``has_bookmarked`` are always ``False`` for anonymous
    viewers. ``reply_count`` counts live replies at read time.
    """

    id: uuid.UUID
    author: AuthorOut
    content: str
    is_private: bool
    reply_to_post_id: uuid.UUID | None
    allow_replies: bool
    media_urls: list[str]
    like_count: int
    repost_count: int
    reply_count: int
    has_liked: bool
    has_bookmarked: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class LikeStateOut:
    """Like counter and membership right after a like/unlike."""

    post_id: uuid.UUID
    like_count: int
    has_liked: bool
