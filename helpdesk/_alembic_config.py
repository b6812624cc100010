"""Build an Alembic config that points at the repository's migrations/."""

from __future__ import annotations

from pathlib import Path

from alembic.config import Config

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MIGRATIONS_PATH = PROJECT_ROOT / "migrations"


def build_alembic_config(database_url: str | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    config.set_main_option("prepend_sys_path", str(PROJECT_ROOT))
    if database_url:
        # env.py では ALEMBIC_DATABASE_URL の次に優先される
        config.set_main_option("sqlalchemy.url", database_url)
    return config


__all__ = ["build_alembic_config", "MIGRATIONS_PATH"]
