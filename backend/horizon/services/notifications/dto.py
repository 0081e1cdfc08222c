# horizon/services/notifications/dto.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from horizon.models.notification import NotificationType
from horizon.services._shared.dto import AuthorOut


@dataclass(frozen=True, slots=True)
class NotificationCreateIn:
    """
    Input DTO for a new notification.

    :param recipient_id: User receiving the notification.
    :type recipient_id: uuid.UUID
    :param actor_id: User whose action triggered it.
    :type actor_id: uuid.UUID
    :param type: Event kind.
    :type type: NotificationType
    :param post_id: Liked post, or the new reply.
    :type post_id: uuid.UUID | None
    :param parent_post_id: Post that was replied to.
    :type parent_post_id: uuid.UUID | None
    """

    recipient_id: uuid.UUID
    actor_id: uuid.UUID
    type: NotificationType
    post_id: uuid.UUID | None = None
    parent_post_id: uuid.UUID | None = None


@dataclass(frozen=True, slots=True)
class NotificationOut:
    """
    Notification as shown to its recipient.

    ``post_content`` and ``parent_post_content`` are ``None`` when the post
    is absent or has been deleted since.
    """

    id: uuid.UUID
    type: NotificationType
    read: bool
    created_at: datetime
    actor: AuthorOut
    post_id: uuid.UUID | None
    post_content: str | None
    parent_post_id: uuid.UUID | None
    parent_post_content: str | None
