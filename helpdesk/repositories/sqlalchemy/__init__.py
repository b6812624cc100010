"""SQLAlchemy-backed repository implementations."""

from .category import SqlAlchemyCategoryRepository
from .progress import SqlAlchemyProgressRepository
from .report import SqlAlchemyReportRepository, apply_report_criteria
from .stats import SqlAlchemyStatsRepository
from .user import SqlAlchemyUserRepository

__all__ = [
    "SqlAlchemyCategoryRepository",
    "SqlAlchemyProgressRepository",
    "SqlAlchemyReportRepository",
    "SqlAlchemyStatsRepository",
    "SqlAlchemyUserRepository",
    "apply_report_criteria",
]
