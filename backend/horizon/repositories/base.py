"""Generic repository base and query utilities for SQLAlchemy 2.x.

Persistence-only concerns shared by every repository:

- offset/limit pagination with an optional total count,
- whitelisted sorting with a deterministic tiebreaker,
- soft-delete aware lookups (``get_live``),
- whitelisted field updates to prevent mass assignment.

Repositories never commit or roll back; services own the Unit of Work.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from horizon.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type
T = TypeVar("T")


# ------------------------------- Pagination ----------------------------------


@dataclass(frozen=True, slots=True)
class Pagination:
    """Window over an ordered listing.

    :param limit: Page size, already clamped by the service layer.
    :type limit: int
    :param offset: Number of rows to skip, already clamped to ``>= 0``.
    :type offset: int
    """

    limit: int
    offset: int


@dataclass(slots=True)
class Page(Generic[T]):
    """Result page with metadata.

    :param items: Rows in the current window.
    :type items: Sequence[T]
    :param total: Total rows matching the query (0 when not computed).
    :type total: int
    :param limit: Page size.
    :type limit: int
    :param offset: Rows skipped.
    :type offset: int
    """

    items: Sequence[T]
    total: int
    limit: int
    offset: int


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens like ``["-created_at"]`` into ``(field, is_desc)``."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    tiebreaker: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply safe ``ORDER BY`` clauses based on a whitelist mapping.

    Unknown tokens are ignored. ``tiebreaker`` is appended last so that rows
    sharing a timestamp keep a stable position across pages.

    :param stmt: Base selectable.
    :param sortable_fields: Public field to ORM attribute mapping.
    :param tokens: Public sort tokens.
    :param tiebreaker: Attribute appended as the final ascending order.
    :returns: Ordered select.
    :rtype: :class:`sqlalchemy.sql.Select`
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if col is not None:
            orders.append(col.desc() if is_desc else col.asc())
    if orders:
        stmt = stmt.order_by(*orders)
    if tiebreaker is not None:
        stmt = stmt.order_by(tiebreaker.asc())
    return stmt


def paginate_select(
    session: Session,
    stmt: Select[Any],
    pagination: Pagination,
    *,
    with_total: bool = True,
    scalars: bool = True,
) -> tuple[list[Any], int]:
    """Execute a select over an offset/limit window.

    The statement's ``ORDER BY`` is stripped for the ``COUNT`` query.

    :param session: Active SQLAlchemy session.
    :param stmt: Filtered and ordered select.
    :param pagination: Window to fetch.
    :param with_total: Whether to compute the total row count.
    :param scalars: Return the first column of each row instead of full rows.
    :returns: ``(items, total)``; ``total`` is 0 when ``with_total=False``.
    :rtype: tuple[list[Any], int]
    """
    total = 0
    if with_total:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = int(session.execute(count_stmt).scalar_one())

    sliced = stmt.limit(pagination.limit).offset(pagination.offset)
    result = session.execute(sliced)
    items = list(result.scalars().all()) if scalars else [tuple(row) for row in result.all()]
    return items, total


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``. They MAY override ``_sortable_fields``,
    ``_default_eagerload`` and ``_updatable_fields``. Models carrying a
    ``deleted_at`` column get soft deletion and live-only lookups for free.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Bind the repository to the Unit of Work session.

        :param session: Session shared across the Unit of Work scope. Falls
            back to the Flask-scoped session when omitted.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Attach eager-loading options to generic lookups (no-op by default)."""
        return stmt

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        """Whitelist of keys that :meth:`assign_updates` may set."""
        return set()

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _supports_soft_delete(self) -> bool:
        return hasattr(self.model, "deleted_at")

    def _live(self, stmt: Select[Any]) -> Select[Any]:
        """Restrict ``stmt`` to rows that are not soft-deleted."""
        if self._supports_soft_delete():
            return stmt.where(getattr(self.model, "deleted_at").is_(None))
        return stmt

    def _by_pk(self, entity_id: Any) -> Select[Any]:
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError(f"{type(self).__name__} requires a detectable PK attribute.")
        return self._default_eagerload(select(self.model).where(pk_attr == entity_id))

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so database defaults and constraints fire.

        :param instance: New entity instance.
        :returns: The same instance after ``flush()``.
        :raises sqlalchemy.exc.IntegrityError: On unique or FK violations.
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key, deleted or not."""
        return cast(E | None, self.session.execute(self._by_pk(entity_id)).scalars().first())

    def get_live(self, entity_id: Any) -> E | None:
        """Retrieve an entity by primary key unless it is soft-deleted."""
        stmt = self._live(self._by_pk(entity_id))
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def get_live_for_update(self, entity_id: Any) -> E | None:
        """Like :meth:`get_live` but takes a ``FOR UPDATE`` row lock when supported.

        Concurrent writers on the same row serialize on this lock, so a
        read-check-write sequence inside one transaction cannot lose updates.
        """
        stmt = self._live(self._by_pk(entity_id)).with_for_update(of=self.model)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def delete(self, instance: E) -> None:
        """Soft-delete when the model supports it, hard-delete otherwise."""
        if self._supports_soft_delete():
            instance.mark_deleted()  # type: ignore[attr-defined]
        else:
            self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        flush: bool = True,
    ) -> E:
        """Assign whitelisted keys to ``instance``.

        ``setattr`` is used so SQLAlchemy ``@validates`` hooks run.

        :param instance: Entity to mutate.
        :param fields: Field mapping to assign.
        :param flush: Call ``session.flush()`` after assignment.
        :returns: The mutated instance.
        :raises ValueError: If a key is not in ``_updatable_fields()``.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        for k, v in fields.items():
            setattr(instance, k, v)
        if flush:
            self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def paginate(
        self,
        stmt: Select[Any],
        pagination: Pagination,
        *,
        sort: Iterable[str] = (),
        with_total: bool = True,
    ) -> Page[E]:
        """Sort and slice ``stmt`` into a :class:`Page` of entities.

        :param stmt: Filtered select over ``model``.
        :param pagination: Window to fetch.
        :param sort: Public sort tokens resolved against ``_sortable_fields``.
        :param with_total: Whether to compute the total row count.
        :returns: Page of entities.
        :rtype: Page[E]
        """
        stmt = apply_sorting(stmt, self._sortable_fields(), sort, tiebreaker=self._pk_attr())
        items, total = paginate_select(self.session, stmt, pagination, with_total=with_total)
        return Page(
            items=cast(list[E], items),
            total=total,
            limit=pagination.limit,
            offset=pagination.offset,
        )
