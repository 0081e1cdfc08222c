"""User, profile and follow-graph schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserSchema(Schema):
    """Account representation returned to its owner."""

    id = fields.UUID(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    display_name = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True)
    location = fields.String(allow_none=True)
    website = fields.String(allow_none=True)
    is_private = fields.Boolean(required=True)
    email_verified = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)


class ProfileSchema(Schema):
    """Public profile with follower/following counts."""

    id = fields.UUID(required=True)
    username = fields.String(required=True)
    display_name = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True)
    location = fields.String(allow_none=True)
    website = fields.String(allow_none=True)
    is_private = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)
    follower_count = fields.Integer(required=True)
    following_count = fields.Integer(required=True)


class ProfileUpdateSchema(Schema):
    """Partial update payload; omitted keys are left untouched."""

    display_name = fields.String(validate=validate.Length(max=100))
    bio = fields.String(validate=validate.Length(max=500))
    location = fields.String(validate=validate.Length(max=100))
    website = fields.String(validate=validate.Length(max=255))
    is_private = fields.Boolean()


class AvatarSchema(Schema):
    avatar_url = fields.String(required=True, validate=validate.Length(min=1, max=512))


class FollowSchema(Schema):
    follower_id = fields.UUID(required=True)
    followed_id = fields.UUID(required=True)
    is_accepted = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)


class FollowStatusSchema(Schema):
    is_following = fields.Boolean(required=True)
    is_accepted = fields.Boolean(required=True)


class UserFollowSchema(Schema):
    """A user listed in a follower/following page, with the edge timestamp."""

    id = fields.UUID(required=True)
    username = fields.String(required=True)
    display_name = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True)
    is_private = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)
    followed_at = fields.DateTime(required=True)
