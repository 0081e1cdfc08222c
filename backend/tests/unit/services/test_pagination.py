"""Pagination clamping shared by every listing."""

from __future__ import annotations

import pytest
from horizon.services._shared.base import DEFAULT_LIMIT, MAX_LIMIT, ensure_pagination
from horizon.services._shared.dto import PageOut


@pytest.mark.parametrize(
    ("limit", "offset", "expected"),
    [
        (None, None, (DEFAULT_LIMIT, 0)),
        (0, 0, (DEFAULT_LIMIT, 0)),
        (-5, -3, (DEFAULT_LIMIT, 0)),
        (25, 40, (25, 40)),
        (10_000, 0, (MAX_LIMIT, 0)),
    ],
)
def test_ensure_pagination_clamps_without_app_context(limit, offset, expected):
    p = ensure_pagination(limit, offset)
    assert (p.limit, p.offset) == expected


def test_ensure_pagination_reads_app_config(app):
    with app.app_context():
        app.config["PAGINATION_MAX_LIMIT"] = 20
        try:
            assert ensure_pagination(100, 0).limit == 20
        finally:
            app.config["PAGINATION_MAX_LIMIT"] = MAX_LIMIT


def test_page_has_next():
    assert PageOut(items=[1, 2], total=5, limit=2, offset=0).has_next
    assert not PageOut(items=[5], total=5, limit=2, offset=4).has_next
