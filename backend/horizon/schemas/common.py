"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields


class PaginationQuerySchema(Schema):
    """Parse ``limit``/``offset`` query parameters.

    Out-of-range values are not rejected here: the service layer clamps them
    to the configured bounds, so ``?limit=0`` simply yields the default page.
    """

    limit = fields.Integer(load_default=None)
    offset = fields.Integer(load_default=None)


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    offset = fields.Integer(required=True)
    has_next = fields.Boolean(required=True)


class AuthorSchema(Schema):
    """Public author card embedded in posts and notifications."""

    id = fields.UUID(required=True)
    username = fields.String(required=True)
    display_name = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True)


def build_meta(page: Any) -> dict[str, Any]:
    """Return a ``meta`` mapping for a :class:`~horizon.services._shared.dto.PageOut`."""

    return {
        "total": int(page.total),
        "limit": int(page.limit),
        "offset": int(page.offset),
        "has_next": bool(page.has_next),
    }
