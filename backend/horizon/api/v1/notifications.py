"""Notification inbox endpoints."""

from __future__ import annotations

from flask import Blueprint

from horizon.api.deps import (
    current_user_id,
    json_response,
    parse_pagination,
    parse_uuid,
    require_auth,
    service_context,
    timing,
)
from horizon.schemas import NotificationSchema, UnreadCountSchema, build_meta
from horizon.services.notifications import NotificationService

bp = Blueprint("notifications", __name__)

notification_schema = NotificationSchema()
notification_list_schema = NotificationSchema(many=True)
unread_schema = UnreadCountSchema()


@bp.get("")
@require_auth
@timing
def list_notifications():
    """Return the caller's notifications, newest first."""

    pagination = parse_pagination()
    service = NotificationService(ctx=service_context())
    page = service.list_for_user(
        current_user_id(), limit=pagination.limit, offset=pagination.offset
    )
    return json_response(
        {"data": notification_list_schema.dump(page.items), "meta": build_meta(page)}
    )


@bp.get("/unread-count")
@require_auth
@timing
def unread_count():
    count = NotificationService(ctx=service_context()).unread_count(current_user_id())
    return json_response({"data": unread_schema.dump({"unread": count})})


@bp.post("/<notification_id>/read")
@require_auth
@timing
def mark_read(notification_id: str):
    service = NotificationService(ctx=service_context())
    notification = service.mark_as_read(
        parse_uuid(notification_id, field="notification id"), current_user_id()
    )
    return json_response({"data": notification_schema.dump(notification)})


@bp.post("/read-all")
@require_auth
@timing
def mark_all_read():
    updated = NotificationService(ctx=service_context()).mark_all_as_read(current_user_id())
    return json_response({"data": {"updated": updated}})


@bp.delete("/<notification_id>")
@require_auth
@timing
def delete_notification(notification_id: str):
    service = NotificationService(ctx=service_context())
    service.delete(parse_uuid(notification_id, field="notification id"), current_user_id())
    return json_response({}, status=204)
