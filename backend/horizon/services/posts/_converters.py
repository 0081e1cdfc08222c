from __future__ import annotations

import uuid
from collections.abc import Sequence

from horizon.models.post import Post
from horizon.repositories.base import Page
from horizon.services._shared.dto import PageOut
from horizon.services.users._converters import user_to_author
from horizon.uow.sqlalchemy_uow import SQLAlchemyRepositoryContainer

from .dto import PostOut


def post_to_out(
    row: Post, *, reply_count: int = 0, has_liked: bool = False, has_bookmarked: bool = False
) -> PostOut:
    """Single mapping from a post row plus viewer annotations to :class:`PostOut`."""
    return PostOut(
        id=row.id,
        author=user_to_author(row.author),
        content=row.content,
        is_private=row.is_private,
        reply_to_post_id=row.reply_to_post_id,
        allow_replies=row.allow_replies,
        media_urls=list(row.media_urls or []),
        like_count=row.like_count,
        repost_count=row.repost_count,
        reply_count=reply_count,
        has_liked=has_liked,
        has_bookmarked=has_bookmarked,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def annotate_posts(
    uow: SQLAlchemyRepositoryContainer, rows: Sequence[Post], viewer_id: uuid.UUID | None
) -> list[PostOut]:
    """Map ``rows`` for ``viewer_id`` with one query per annotation, not per post."""
    ids = [row.id for row in rows]
    replies = uow.posts.count_replies(ids, viewer_id)
    liked: set[uuid.UUID] = set()
    bookmarked: set[uuid.UUID] = set()
    if viewer_id is not None:
        liked = uow.likes.post_ids_for(viewer_id, ids)
        bookmarked = uow.bookmarks.post_ids_for(viewer_id, ids)
    return [
        post_to_out(
            row,
            reply_count=replies.get(row.id, 0),
            has_liked=row.id in liked,
            has_bookmarked=row.id in bookmarked,
        )
        for row in rows
    ]


def page_to_out(
    uow: SQLAlchemyRepositoryContainer, page: Page[Post], viewer_id: uuid.UUID | None
) -> PageOut[PostOut]:
    return PageOut(
        items=annotate_posts(uow, page.items, viewer_id),
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )
