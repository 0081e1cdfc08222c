"""Notification schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from horizon.models.notification import NotificationType

from .common import AuthorSchema


class NotificationSchema(Schema):
    """Notification with its actor and the referenced post content, if any."""

    id = fields.UUID(required=True)
    type = fields.Enum(NotificationType, by_value=True, required=True)
    read = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)
    actor = fields.Nested(AuthorSchema, required=True)
    post_id = fields.UUID(allow_none=True)
    post_content = fields.String(allow_none=True)
    parent_post_id = fields.UUID(allow_none=True)
    parent_post_content = fields.String(allow_none=True)


class UnreadCountSchema(Schema):
    unread = fields.Integer(required=True)
