"""Infrastructure adapters such as the Unit of Work implementation."""

from .unit_of_work import SqlAlchemyUnitOfWork, UnitOfWork

__all__ = ["SqlAlchemyUnitOfWork", "UnitOfWork"]
