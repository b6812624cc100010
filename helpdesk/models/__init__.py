# モジュール読み込み用（Alembicがモデルを見つけるために必要）
# helpdesk/models/__init__.py
from .base import Base
from .category import Category
from .enums import ReportStatus, UserRole
from .report import Report
from .report_progress import ReportProgress
from .user import User

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Category",
    "Report",
    "ReportStatus",
    "ReportProgress",
]
