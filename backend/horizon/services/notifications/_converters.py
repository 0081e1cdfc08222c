from __future__ import annotations

from horizon.models.notification import Notification
from horizon.models.post import Post
from horizon.services.users._converters import user_to_author

from .dto import NotificationOut


def _live_content(post: Post | None) -> str | None:
    if post is None or post.is_deleted:
        return None
    return post.content


def notification_to_out(row: Notification) -> NotificationOut:
    return NotificationOut(
        id=row.id,
        type=row.type,
        read=row.read,
        created_at=row.created_at,
        actor=user_to_author(row.actor),
        post_id=row.post_id,
        post_content=_live_content(row.post),
        parent_post_id=row.parent_post_id,
        parent_post_content=_live_content(row.parent_post),
    )
