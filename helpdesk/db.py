# helpdesk/db.py
import os

from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from helpdesk.core.config import get_settings

# 同期ドライバ名で渡された DSN を async ドライバへ寄せる
_ASYNC_SCHEMES = (
    ("postgres://", "postgresql+asyncpg://"),
    ("postgresql://", "postgresql+asyncpg://"),
    ("postgresql+psycopg://", "postgresql+asyncpg://"),
    ("postgresql+psycopg2://", "postgresql+asyncpg://"),
    ("sqlite://", "sqlite+aiosqlite://"),
)

DATABASE_URL: str
engine: AsyncEngine
SessionLocal: async_sessionmaker[AsyncSession]


def to_async_url(database_url: str) -> str:
    for prefix, replacement in _ASYNC_SCHEMES:
        if database_url.startswith(prefix):
            return replacement + database_url[len(prefix) :]
    return database_url


def _asyncpg_url(url: URL) -> tuple[URL, dict]:
    """asyncpg は sslmode / channel_binding を解釈しないのでクエリから外す。"""
    query = dict(url.query)
    connect_args = {}
    if "sslmode" in query:
        connect_args["ssl"] = query.pop("sslmode")
    query.pop("channel_binding", None)
    return url._replace(query=query), connect_args


def build_engine(database_url: str) -> AsyncEngine:
    url = make_url(to_async_url(database_url))
    if url.get_backend_name() == "postgresql" and url.get_driver_name() == "asyncpg":
        url, connect_args = _asyncpg_url(url)
        return create_async_engine(url, pool_pre_ping=True, connect_args=connect_args)
    return create_async_engine(url)


def configure_engine(database_url: str | None = None) -> None:
    """(Re)build the module-level engine and session factory."""
    global engine, SessionLocal, DATABASE_URL

    DATABASE_URL = database_url or os.getenv("DATABASE_URL") or get_settings().database_url
    engine = build_engine(DATABASE_URL)
    SessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


configure_engine()
