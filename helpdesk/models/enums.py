from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    reporter = "pelapor"
    admin = "admin"


class ReportStatus(str, Enum):
    """Report workflow states. Any state may be set from any other by an admin."""

    new = "baru"
    in_progress = "proses"
    done = "selesai"
