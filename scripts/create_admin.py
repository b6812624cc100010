"""Bootstrap an admin account (and optionally default categories).

    python scripts/create_admin.py --username admin --email admin@example.com \
        --name "Admin Kemenag" --password secret123 --with-categories
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

from helpdesk import db
from helpdesk.core.exceptions import ConflictError
from helpdesk.infra.unit_of_work import SqlAlchemyUnitOfWork
from helpdesk.logging import setup_logging
from helpdesk.models import UserRole
from helpdesk.schemas.category import CategoryCreateRequest
from helpdesk.schemas.user import UserCreateRequest
from helpdesk.services.categories import CategoryService
from helpdesk.services.users import UserService

DEFAULT_CATEGORIES = (
    ("Data Siswa", "Kesalahan atau perubahan data siswa (NISN, nama, tanggal lahir)"),
    ("Data Sekolah", "Perubahan profil madrasah / NPSN"),
    ("Akun & Login", "Masalah akses akun aplikasi"),
    ("Lainnya", None),
)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the first admin account")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--database-url", help="DATABASE_URL を上書き")
    parser.add_argument(
        "--with-categories", action="store_true", help="既定のカテゴリも作成する"
    )
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    if args.database_url:
        db.configure_engine(args.database_url)

    def uow_factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(db.SessionLocal)

    try:
        admin = await UserService(uow_factory).create(
            UserCreateRequest(
                username=args.username,
                name=args.name,
                email=args.email,
                password=args.password,
                role=UserRole.admin,
            )
        )
    except ConflictError as exc:
        print(f"create_admin: {exc}", file=sys.stderr)
        return 1
    print(f"create_admin: admin id={admin.id}")

    if args.with_categories:
        categories = CategoryService(uow_factory)
        for name, description in DEFAULT_CATEGORIES:
            await categories.create(CategoryCreateRequest(name=name, description=description))
        print(f"create_admin: {len(DEFAULT_CATEGORIES)} categories")

    await db.engine.dispose()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    setup_logging()
    return asyncio.run(_run(_parse_args(argv)))


if __name__ == "__main__":
    raise SystemExit(main())
