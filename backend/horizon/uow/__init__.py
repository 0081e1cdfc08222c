"""Transactional boundaries for service use-cases.

Services depend on :class:`UnitOfWork`; the SQLAlchemy implementations bind
every repository to the Flask-scoped session.
"""

from .base import SupportsCommit, UnitOfWork
from .sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyRepositoryContainer,
    SQLAlchemyUnitOfWork,
)

__all__ = [
    "SupportsCommit",
    "UnitOfWork",
    "SQLAlchemyRepositoryContainer",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
]
