"""Post, reply, like and bookmark endpoints."""

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
    LikeStateSchema,
    PostCreateSchema,
    PostSchema,
    PostUpdateSchema,
    build_meta,
)
from horizon.services.posts import (
    InteractionService,
    PostCommandService,
    PostCreateIn,
    PostQueryService,
    PostUpdateIn,
)

bp = Blueprint("posts", __name__)

post_schema = PostSchema()
post_list_schema = PostSchema(many=True)
post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
like_state_schema = LikeStateSchema()


@bp.get("")
@optional_auth
@timing
def list_posts():
    """Return the global timeline of top-level posts, newest first."""

    pagination = parse_pagination()
    service = PostQueryService(ctx=service_context())
    page = service.get_posts(current_user_id(), limit=pagination.limit, offset=pagination.offset)
    return json_response({"data": post_list_schema.dump(page.items), "meta": build_meta(page)})


@bp.post("")
@require_auth
@timing
def create_post():
    """Create a post, or a reply when ``reply_to_post_id`` is given."""

    payload = post_create_schema.load(request.get_json(silent=True) or {})
    service = PostCommandService(ctx=service_context())
    post = service.create(
        PostCreateIn(
            author_id=current_user_id(),
            content=payload["content"],
            is_private=payload["is_private"],
            reply_to_post_id=payload["reply_to_post_id"],
            media_urls=tuple(payload["media_urls"]),
            allow_replies=payload["allow_replies"],
        )
    )
    return json_response({"data": post_schema.dump(post)}, status=201)


@bp.get("/<post_id>")
@optional_auth
@timing
def get_post(post_id: str):
    service = PostQueryService(ctx=service_context())
    post = service.get_post(parse_uuid(post_id, field="post id"), current_user_id())
    return json_response({"data": post_schema.dump(post)})


@bp.patch("/<post_id>")
@require_auth
@timing
def update_post(post_id: str):
    """Edit the content of one of the caller's posts."""

    payload = post_update_schema.load(request.get_json(silent=True) or {})
    service = PostCommandService(ctx=service_context())
    post = service.update_content(
        PostUpdateIn(
            post_id=parse_uuid(post_id, field="post id"),
            actor_id=current_user_id(),
            content=payload["content"],
        )
    )
    return json_response({"data": post_schema.dump(post)})


@bp.delete("/<post_id>")
@require_auth
@timing
def delete_post(post_id: str):
    service = PostCommandService(ctx=service_context())
    service.delete(parse_uuid(post_id, field="post id"), current_user_id())
    return json_response({}, status=204)


@bp.get("/<post_id>/replies")
@optional_auth
@timing
def list_replies(post_id: str):
    """Return live replies to a post, oldest first."""

    pagination = parse_pagination()
    service = PostQueryService(ctx=service_context())
    page = service.get_post_replies(
        parse_uuid(post_id, field="post id"),
        current_user_id(),
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return json_response({"data": post_list_schema.dump(page.items), "meta": build_meta(page)})


# ---------------------------------------------------------------------- #
# Likes
# ---------------------------------------------------------------------- #


@bp.get("/<post_id>/like")
@optional_auth
@timing
def like_status(post_id: str):
    """Whether the caller liked the post; always ``false`` for anonymous callers."""

    service = InteractionService(ctx=service_context())
    liked = service.has_liked(parse_uuid(post_id, field="post id"), current_user_id())
    return json_response({"data": {"has_liked": liked}})


@bp.post("/<post_id>/like")
@require_auth
@timing
def like_post(post_id: str):
    service = InteractionService(ctx=service_context())
    state = service.like(parse_uuid(post_id, field="post id"), current_user_id())
    return json_response({"data": like_state_schema.dump(state)}, status=201)


@bp.delete("/<post_id>/like")
@require_auth
@timing
def unlike_post(post_id: str):
    service = InteractionService(ctx=service_context())
    state = service.unlike(parse_uuid(post_id, field="post id"), current_user_id())
    return json_response({"data": like_state_schema.dump(state)})


# ---------------------------------------------------------------------- #
# Bookmarks
# ---------------------------------------------------------------------- #


@bp.post("/<post_id>/bookmark")
@require_auth
@timing
def bookmark_post(post_id: str):
    service = InteractionService(ctx=service_context())
    service.bookmark(parse_uuid(post_id, field="post id"), current_user_id())
    return json_response({"data": {"has_bookmarked": True}}, status=201)


@bp.delete("/<post_id>/bookmark")
@require_auth
@timing
def unbookmark_post(post_id: str):
    service = InteractionService(ctx=service_context())
    service.unbookmark(parse_uuid(post_id, field="post id"), current_user_id())
    return json_response({}, status=204)
