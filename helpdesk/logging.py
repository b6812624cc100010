from __future__ import annotations

import logging
import os
from typing import Any

import structlog


def _level_from_env() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)


def _renderer() -> Any:
    fmt = os.getenv("LOG_FORMAT")
    if fmt is None:
        # dev はコンソール向け、それ以外は JSON lines
        fmt = "console" if os.getenv("APP_ENV") == "dev" else "json"
    if fmt.lower() == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(log_file: str | os.PathLike | None = None) -> None:
    """Route structlog and stdlib logging through one formatter.

    Every record carries an ISO/UTC timestamp, the level and whatever is bound
    in contextvars (request_id, path, method). ``LOG_FILE`` adds a file handler.
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer()],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_file = log_file or os.getenv("LOG_FILE")
    if log_file:
        parent = os.path.dirname(str(log_file))
        if parent:
            os.makedirs(parent, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=_level_from_env(), handlers=handlers, force=True)


def get_logger(*args: Any, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(*args, **kwargs)
