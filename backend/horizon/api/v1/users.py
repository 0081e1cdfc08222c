"""User profile, listing and follow-graph endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from horizon.api.deps import (
    current_user_id,
    json_response,
    optional_auth,
    parse_pagination,
    parse_uuid,
    require_auth,
    service_context,
    timing,
)
from horizon.schemas import (
    AvatarSchema,
    FollowSchema,
    FollowStatusSchema,
    PostSchema,
    ProfileSchema,
    ProfileUpdateSchema,
    UserFollowSchema,
    UserSchema,
    build_meta,
)
from horizon.services.follows import FollowIn, FollowService
from horizon.services.posts import PostQueryService
from horizon.services.users import ProfileUpdateIn, UserService

bp = Blueprint("users", __name__)

user_schema = UserSchema()
profile_schema = ProfileSchema()
profile_update_schema = ProfileUpdateSchema()
avatar_schema = AvatarSchema()
post_list_schema = PostSchema(many=True)
follow_schema = FollowSchema()
follow_status_schema = FollowStatusSchema()
user_follow_list_schema = UserFollowSchema(many=True)


def _page_body(page, schema) -> dict:
    return {"data": schema.dump(page.items), "meta": build_meta(page)}


# ---------------------------------------------------------------------- #
# Profiles
# ---------------------------------------------------------------------- #


@bp.get("/<username>")
@timing
def get_profile(username: str):
    """Return a public profile with follower/following counts."""

    profile = UserService(ctx=service_context()).get_profile(username)
    return json_response({"data": profile_schema.dump(profile)})


@bp.patch("/me")
@require_auth
@timing
def update_profile():
    """Apply a partial update to the caller's profile."""

    payload = profile_update_schema.load(request.get_json(silent=True) or {})
    service = UserService(ctx=service_context())
    user = service.update_profile(ProfileUpdateIn(actor_id=current_user_id(), **payload))
    return json_response({"data": user_schema.dump(user)})


@bp.put("/me/avatar")
@require_auth
@timing
def update_avatar():
    payload = avatar_schema.load(request.get_json(silent=True) or {})
    service = UserService(ctx=service_context())
    user = service.update_avatar(current_user_id(), payload["avatar_url"])
    return json_response({"data": user_schema.dump(user)})


# ---------------------------------------------------------------------- #
# Post listings
# ---------------------------------------------------------------------- #


@bp.get("/me/bookmarks")
@require_auth
@timing
def list_bookmarks():
    pagination = parse_pagination()
    service = PostQueryService(ctx=service_context())
    page = service.get_user_bookmarks(
        current_user_id(), limit=pagination.limit, offset=pagination.offset
    )
    return json_response(_page_body(page, post_list_schema))


@bp.get("/<username>/posts")
@optional_auth
@timing
def list_user_posts(username: str):
    pagination = parse_pagination()
    service = PostQueryService(ctx=service_context())
    page = service.get_user_posts(
        username, current_user_id(), limit=pagination.limit, offset=pagination.offset
    )
    return json_response(_page_body(page, post_list_schema))


@bp.get("/<username>/replies")
@optional_auth
@timing
def list_user_replies(username: str):
    pagination = parse_pagination()
    service = PostQueryService(ctx=service_context())
    page = service.get_user_replies(
        username, current_user_id(), limit=pagination.limit, offset=pagination.offset
    )
    return json_response(_page_body(page, post_list_schema))


@bp.get("/<username>/likes")
@optional_auth
@timing
def list_user_likes(username: str):
    pagination = parse_pagination()
    service = PostQueryService(ctx=service_context())
    page = service.get_user_liked_posts(
        username, current_user_id(), limit=pagination.limit, offset=pagination.offset
    )
    return json_response(_page_body(page, post_list_schema))


# ---------------------------------------------------------------------- #
# Follow graph
# ---------------------------------------------------------------------- #


@bp.post("/<user_id>/follow")
@require_auth
@timing
def follow(user_id: str):
    """Follow a user; the edge is pending when the target account is private."""

    service = FollowService(ctx=service_context())
    edge = service.follow(
        FollowIn(follower_id=current_user_id(), followed_id=parse_uuid(user_id, field="user id"))
    )
    return json_response({"data": follow_schema.dump(edge)}, status=201)


@bp.delete("/<user_id>/follow")
@require_auth
@timing
def unfollow(user_id: str):
    service = FollowService(ctx=service_context())
    service.unfollow(
        FollowIn(follower_id=current_user_id(), followed_id=parse_uuid(user_id, field="user id"))
    )
    return json_response({}, status=204)


@bp.get("/<user_id>/follow-status")
@optional_auth
@timing
def follow_status(user_id: str):
    service = FollowService(ctx=service_context())
    status = service.get_follow_status(current_user_id(), parse_uuid(user_id, field="user id"))
    return json_response({"data": follow_status_schema.dump(status)})


@bp.get("/<user_id>/followers")
@timing
def list_followers(user_id: str):
    pagination = parse_pagination()
    service = FollowService(ctx=service_context())
    page = service.get_followers(
        parse_uuid(user_id, field="user id"), limit=pagination.limit, offset=pagination.offset
    )
    return json_response(_page_body(page, user_follow_list_schema))


@bp.get("/<user_id>/following")
@timing
def list_following(user_id: str):
    pagination = parse_pagination()
    service = FollowService(ctx=service_context())
    page = service.get_following(
        parse_uuid(user_id, field="user id"), limit=pagination.limit, offset=pagination.offset
    )
    return json_response(_page_body(page, user_follow_list_schema))


@bp.get("/me/follow-requests")
@require_auth
@timing
def list_follow_requests():
    """Pending follow requests addressed to the caller."""

    pagination = parse_pagination()
    service = FollowService(ctx=service_context())
    page = service.get_pending_requests(
        current_user_id(), limit=pagination.limit, offset=pagination.offset
    )
    return json_response(_page_body(page, user_follow_list_schema))


@bp.post("/me/follow-requests/<follower_id>/accept")
@require_auth
@timing
def accept_follow_request(follower_id: str):
    service = FollowService(ctx=service_context())
    edge = service.accept_follow_request(
        FollowIn(
            follower_id=parse_uuid(follower_id, field="follower id"),
            followed_id=current_user_id(),
        )
    )
    return json_response({"data": follow_schema.dump(edge)})
