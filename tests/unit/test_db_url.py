import pytest

from helpdesk.db import build_engine, to_async_url


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql+psycopg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("sqlite:///tmp/x.db", "sqlite+aiosqlite:///tmp/x.db"),
        ("sqlite+aiosqlite:///tmp/x.db", "sqlite+aiosqlite:///tmp/x.db"),
    ],
)
def test_to_async_url(raw, expected):
    assert to_async_url(raw) == expected


def test_sslmode_is_moved_out_of_the_asyncpg_query():
    engine = build_engine("postgresql://u:p@h/db?sslmode=require&channel_binding=require")
    assert engine.url.drivername == "postgresql+asyncpg"
    assert "sslmode" not in engine.url.query
    assert "channel_binding" not in engine.url.query
