"""Best-effort notification delivery after a primary use-case commits."""

from __future__ import annotations

import logging
import uuid

from horizon.models.notification import NotificationType
from horizon.services._shared.base import ServiceContext

from .dto import NotificationCreateIn
from .service import NotificationService

logger = logging.getLogger(__name__)


class NotificationFanout:
    """
    Emit notifications without ever failing the caller.

    Called by likes, replies and follows *after* their own transaction has
    committed. The notification is written in a separate Unit of Work, so a
    failure here cannot undo the primary change, and any exception is logged
    and swallowed.
    """

    def __init__(self, service: NotificationService | None = None, *, ctx: ServiceContext | None = None) -> None:
        self.service = service or NotificationService(ctx=ctx)

    def notify(
        self,
        *,
        recipient_id: uuid.UUID,
        actor_id: uuid.UUID,
        type: NotificationType,
        post_id: uuid.UUID | None = None,
        parent_post_id: uuid.UUID | None = None,
    ) -> bool:
        """
        Create a notification for ``recipient_id``.

        :returns: ``True`` if a notification was written, ``False`` when it
            was skipped (self-action) or failed.
        :rtype: bool
        """
        if recipient_id == actor_id:
            return False
        try:
            self.service.create(
                NotificationCreateIn(
                    recipient_id=recipient_id,
                    actor_id=actor_id,
                    type=type,
                    post_id=post_id,
                    parent_post_id=parent_post_id,
                )
            )
        except Exception:
            logger.exception(
                "Notification delivery failed",
                extra={"recipient_id": recipient_id, "actor_id": actor_id, "type": type.value},
            )
            return False
        return True
