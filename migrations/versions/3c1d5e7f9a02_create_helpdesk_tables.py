"""create users, categories, reports and report_progress

Revision ID: 3c1d5e7f9a02
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c1d5e7f9a02"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

USER_ROLES = ("pelapor", "admin")
REPORT_STATUSES = ("baru", "proses", "selesai")


def upgrade() -> None:
    bind = op.get_bind()
    postgresql.ENUM(*USER_ROLES, name="user_role").create(bind, checkfirst=True)
    postgresql.ENUM(*REPORT_STATUSES, name="report_status").create(bind, checkfirst=True)
    # 型は上で作成済み。create_table 側では再作成しない
    user_role = postgresql.ENUM(*USER_ROLES, name="user_role", create_type=False)
    report_status = postgresql.ENUM(*REPORT_STATUSES, name="report_status", create_type=False)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("npsn", sa.String(8), nullable=False),
        sa.Column("school_name", sa.Text(), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("issue_description", sa.Text(), nullable=False),
        sa.Column("nisn", sa.String(10), nullable=True),
        sa.Column("status", report_status, nullable=False, server_default="baru"),
        sa.Column("reporter_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_reports_npsn", "reports", ["npsn"])
    op.create_index("ix_reports_category_id", "reports", ["category_id"])
    op.create_index("ix_reports_status", "reports", ["status"])
    op.create_index("ix_reports_reporter_id", "reports", ["reporter_id"])
    # 一覧の created_at DESC, id DESC 並び用
    op.create_index("ix_reports_created_at_id", "reports", ["created_at", "id"])

    op.create_table(
        "report_progress",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "report_id",
            sa.Integer(),
            sa.ForeignKey("reports.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("admin_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("status", report_status, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_report_progress_report_id", "report_progress", ["report_id"])


def downgrade() -> None:
    op.drop_index("ix_report_progress_report_id", table_name="report_progress")
    op.drop_table("report_progress")
    for name in (
        "ix_reports_created_at_id",
        "ix_reports_reporter_id",
        "ix_reports_status",
        "ix_reports_category_id",
        "ix_reports_npsn",
    ):
        op.drop_index(name, table_name="reports")
    op.drop_table("reports")
    op.drop_table("categories")
    op.drop_table("users")
    bind = op.get_bind()
    postgresql.ENUM(name="report_status").drop(bind, checkfirst=True)
    postgresql.ENUM(name="user_role").drop(bind, checkfirst=True)
