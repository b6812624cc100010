# tests/conftest.py
import os
from collections.abc import Awaitable, Callable
from types import SimpleNamespace

# create_app / get_settings が読む前に環境を固定する
os.environ["TESTING"] = "1"
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.pop("SENTRY_DSN", None)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from dotenv import load_dotenv  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from helpdesk.api.deps import get_session_factory  # noqa: E402
from helpdesk.core.security import hash_password  # noqa: E402
from helpdesk.infra.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from helpdesk.main import create_app  # noqa: E402
from helpdesk.models import (  # noqa: E402
    Base,
    Category,
    Report,
    ReportProgress,
    ReportStatus,
    User,
    UserRole,
)
from helpdesk.services.progress import INITIAL_PROGRESS_NOTE  # noqa: E402

load_dotenv(".env.test", override=False)

PASSWORD = "rahasia123"


def _database_url(tmp_path) -> str:
    # 既定はテストごとの SQLite ファイル。Postgres で流すときは TEST_DATABASE_URL
    return os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'helpdesk.db'}"


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    eng = create_async_engine(_database_url(tmp_path), poolclass=NullPool)
    if eng.dialect.name == "sqlite":

        @event.listens_for(eng.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
def uow_factory(session_factory):
    return lambda: SqlAlchemyUnitOfWork(session_factory)


@pytest_asyncio.fixture
async def seed(session_factory) -> SimpleNamespace:
    """Two reporters, an active and an inactive admin, two active and one inactive category."""
    pw = hash_password(PASSWORD)
    async with session_factory() as s:
        admin = User(
            username="admin",
            name="Admin Kanwil",
            email="admin@example.com",
            password_hash=pw,
            role=UserRole.admin,
        )
        retired_admin = User(
            username="admin_lama",
            name="Admin Lama",
            email="lama@example.com",
            password_hash=pw,
            role=UserRole.admin,
            is_active=False,
        )
        reporter = User(
            username="operator1",
            name="Siti Aminah",
            email="siti@example.com",
            password_hash=pw,
            role=UserRole.reporter,
        )
        other = User(
            username="operator2",
            name="Budi Santoso",
            email="budi@example.com",
            password_hash=pw,
            role=UserRole.reporter,
        )
        data_siswa = Category(name="Data Siswa", description="Perubahan data siswa")
        akun = Category(name="Akun & Login")
        lama = Category(name="Kategori Lama", is_active=False)
        s.add_all([admin, retired_admin, reporter, other, data_siswa, akun, lama])
        await s.commit()
        return SimpleNamespace(
            admin=admin.id,
            retired_admin=retired_admin.id,
            reporter=reporter.id,
            other_reporter=other.id,
            category=data_siswa.id,
            other_category=akun.id,
            inactive_category=lama.id,
        )


@pytest.fixture
def make_report(session_factory, seed) -> Callable[..., Awaitable[int]]:
    """Insert a report directly (with its creation entry) so tests can pin created_at."""

    async def _make(**overrides) -> int:
        fields = {
            "npsn": "12345678",
            "school_name": "MI Nurul Huda",
            "category_id": seed.category,
            "issue_description": "Nama siswa salah ketik di EMIS",
            "reporter_id": seed.reporter,
            "status": ReportStatus.new,
        }
        fields.update(overrides)
        async with session_factory() as s:
            report = Report(**fields)
            s.add(report)
            await s.flush()
            s.add(
                ReportProgress(
                    report_id=report.id,
                    admin_id=None,
                    status=report.status,
                    notes=INITIAL_PROGRESS_NOTE,
                    created_at=report.created_at,
                )
            )
            await s.commit()
            return report.id

    return _make


@pytest_asyncio.fixture
async def app_client(session_factory, seed):
    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

