# comments in English; reST docstrings strict
from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PaginationIn:
    """
    Input pagination contract, before clamping.

    :param limit: Requested page size; ``None`` or ``<= 0`` means default.
    :type limit: int | None
    :param offset: Requested number of rows to skip; negatives mean 0.
    :type offset: int | None
    """

    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True, slots=True)
class PageOut(Generic[T]):
    """
    Output page of DTOs.

    :param items: DTOs in the current window.
    :type items: Sequence[T]
    :param total: Total rows available.
    :type total: int
    :param limit: Effective page size after clamping.
    :type limit: int
    :param offset: Effective offset after clamping.
    :type offset: int
    """

    items: Sequence[T]
    total: int
    limit: int
    offset: int

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total


@dataclass(frozen=True, slots=True)
class AuthorOut:
    """
    Minimal public view of a user embedded in posts and notifications.

    :param id: User id.
    :param username: Public handle.
    :param display_name: Display name.
    :param avatar_url: Opaque avatar URL, if any.
    """

    id: uuid.UUID
    username: str
    display_name: str | None
    avatar_url: str | None
