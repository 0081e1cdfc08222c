"""Notification service layer: persistence, reads and fan-out."""

from __future__ import annotations

from .dto import NotificationCreateIn, NotificationOut
from .fanout import NotificationFanout
from .service import NotificationService

__all__ = [
    "NotificationCreateIn",
    "NotificationFanout",
    "NotificationOut",
    "NotificationService",
]
