from __future__ import annotations

import time
import uuid
from collections.abc import Callable

import sentry_sdk
import structlog
from fastapi import Request, Response

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


def _tag_sentry_scope(rid: str, request: Request) -> None:
    # Sentry 未初期化でも set_tag は no-op
    for key, value in (("request_id", rid), ("path", request.url.path), ("method", request.method)):
        sentry_sdk.set_tag(key, value)


def _access_fields(request: Request, rid: str, status: int, started_ns: int) -> dict:
    return {
        "request_id": rid,
        "path": request.url.path,
        "method": request.method,
        "status": status,
        "duration_ms": round((time.perf_counter_ns() - started_ns) / 1_000_000.0, 3),
        "client_ip": (request.client.host if request.client else None) or "-",
    }


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    """Propagate or mint X-Request-ID and write one access log line per request.

    The id is bound to structlog contextvars so that service-level events
    (report_created, login_failed, ...) carry it too.
    """
    rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(
        request_id=rid, path=request.url.path, method=request.method
    )
    _tag_sentry_scope(rid, request)

    started_ns = time.perf_counter_ns()
    try:
        response = await call_next(request)
    except Exception:
        logger.error(
            "http_request", **_access_fields(request, rid, 500, started_ns), exc_info=True
        )
        structlog.contextvars.clear_contextvars()
        raise

    logger.info("http_request", **_access_fields(request, rid, response.status_code, started_ns))
    response.headers[REQUEST_ID_HEADER] = rid
    structlog.contextvars.clear_contextvars()
    return response
