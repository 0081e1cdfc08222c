"""Post and interaction schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .common import AuthorSchema

MAX_CONTENT_LENGTH = 280
MAX_MEDIA_URLS = 4


class PostCreateSchema(Schema):
    """Input payload for a new post or reply."""

    content = fields.String(required=True, validate=validate.Length(min=1, max=MAX_CONTENT_LENGTH))
    is_private = fields.Boolean(load_default=False)
    reply_to_post_id = fields.UUID(load_default=None)
    allow_replies = fields.Boolean(load_default=True)
    media_urls = fields.List(
        fields.String(validate=validate.Length(min=1, max=512)),
        load_default=list,
        validate=validate.Length(max=MAX_MEDIA_URLS),
    )


class PostUpdateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=MAX_CONTENT_LENGTH))


class PostSchema(Schema):
    """Post as seen by a given viewer."""

    id = fields.UUID(required=True)
    author = fields.Nested(AuthorSchema, required=True)
    content = fields.String(required=True)
    is_private = fields.Boolean(required=True)
    reply_to_post_id = fields.UUID(allow_none=True)
    allow_replies = fields.Boolean(required=True)
    media_urls = fields.List(fields.String(), required=True)
    like_count = fields.Integer(required=True)
    repost_count = fields.Integer(required=True)
    reply_count = fields.Integer(required=True)
    has_liked = fields.Boolean(required=True)
    has_bookmarked = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)


class LikeStateSchema(Schema):
    post_id = fields.UUID(required=True)
    like_count = fields.Integer(required=True)
    has_liked = fields.Boolean(required=True)
