"""Run ``alembic upgrade head`` on startup and remember the outcome for /readyz."""

from __future__ import annotations

import os
import threading
import time
from typing import Final

import structlog
from alembic import command
from structlog.stdlib import BoundLogger

from helpdesk._alembic_config import build_alembic_config

_MAX_ATTEMPTS: Final[int] = int(os.getenv("ALEMBIC_STARTUP_MAX_ATTEMPTS", "10"))
_RETRY_DELAY_SECONDS: Final[float] = float(os.getenv("ALEMBIC_STARTUP_RETRY_SECONDS", "2"))
_MIGRATIONS_COMPLETED: bool = False
_MIGRATION_ERROR: str | None = None
_WORKER: threading.Thread | None = None


def _exit_on_failure() -> bool:
    override = os.getenv("ALEMBIC_EXIT_ON_FAILURE")
    if override is not None:
        return override.lower() in {"1", "true", "yes", "on"}
    return os.getenv("APP_ENV", "dev").lower() == "prod"


def is_migration_completed() -> bool:
    return _MIGRATIONS_COMPLETED


def last_migration_error() -> str | None:
    return _MIGRATION_ERROR


def _record(success: bool, error: str | None) -> None:
    global _MIGRATIONS_COMPLETED, _MIGRATION_ERROR
    _MIGRATIONS_COMPLETED = success
    _MIGRATION_ERROR = None if success else error


def run_database_migrations() -> None:
    """Upgrade the schema to head.

    In prod the upgrade blocks startup and a failure exits the process.
    Elsewhere it runs in a daemon thread and /readyz answers 503 until done.
    """
    global _WORKER
    logger = structlog.get_logger(__name__)

    if _MIGRATIONS_COMPLETED:
        logger.info("alembic_upgrade_skipped", reason="already_completed")
        return
    if os.getenv("TESTING"):
        _record(True, None)
        logger.info("alembic_upgrade_skipped", reason="testing")
        return

    if _exit_on_failure():
        success, error = _upgrade_with_retries(logger)
        _record(success, error)
        if not success:
            raise SystemExit(1)
        return

    if _WORKER and _WORKER.is_alive():
        logger.info("alembic_upgrade_skipped", reason="already_running")
        return
    _record(False, None)
    _WORKER = threading.Thread(target=_run_in_background, name="alembic-startup", daemon=True)
    _WORKER.start()
    logger.info("alembic_upgrade_background_started")


def _run_in_background() -> None:
    _record(*_upgrade_with_retries(structlog.get_logger(__name__).bind(mode="async")))


def _upgrade_with_retries(logger: BoundLogger) -> tuple[bool, str | None]:
    config = build_alembic_config()
    last_error: str | None = None

    for attempt in range(1, _MAX_ATTEMPTS + 1):
        try:
            logger.info("alembic_upgrade_start", attempt=attempt)
            command.upgrade(config, "head")
        except Exception as exc:  # pragma: no cover - DB 未起動など
            last_error = str(exc) or exc.__class__.__name__
            logger.exception("alembic_upgrade_failed", attempt=attempt)
        else:
            logger.info("alembic_upgrade_succeeded", attempt=attempt)
            return True, None

        if attempt < _MAX_ATTEMPTS:
            delay = _RETRY_DELAY_SECONDS * attempt
            logger.info("alembic_upgrade_retry", next_attempt=attempt + 1, delay_seconds=delay)
            time.sleep(delay)

    logger.error("alembic_upgrade_exhausted", attempts=_MAX_ATTEMPTS)
    return False, last_error or "alembic upgrade failed"


__all__ = ["is_migration_completed", "last_migration_error", "run_database_migrations"]
