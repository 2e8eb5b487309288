"""Unit of Work abstractions and the SQLAlchemy implementation."""

from .base import UnitOfWork
from .sqlalchemy_uow import ReadOnlyViolation, SQLAlchemyUnitOfWork

__all__ = [
    "ReadOnlyViolation",
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
]
