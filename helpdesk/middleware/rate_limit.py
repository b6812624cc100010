"""IP based rate limiting.

``limits`` does the counting so that limits can differ per method and per
path without decorating routers.
"""

from __future__ import annotations

import os
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from limits import parse as parse_limit
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter

LOGIN_PATH = "/auth/login"
LOGIN_LIMIT = "10/minute"

_storage = MemoryStorage()
_rate = MovingWindowRateLimiter(_storage)


def client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "local"


def _enabled() -> bool:
    # TESTING 中は無効。RATE_LIMIT_ENABLED=1 で強制有効
    if os.getenv("RATE_LIMIT_ENABLED", "").lower() in {"1", "true"}:
        return True
    return not os.getenv("TESTING")


def limit_for(method: str, path: str) -> str | None:
    m = method.upper()
    if m == "POST" and path == LOGIN_PATH:
        return LOGIN_LIMIT
    if m in {"GET", "HEAD"}:
        return "120/minute"
    if m in {"POST", "PATCH", "DELETE"}:
        return "30/minute"
    return None


def reset_limits() -> None:
    _storage.reset()


async def rate_limit_middleware(request: Request, call_next: Callable) -> Response:
    if not _enabled():
        return await call_next(request)

    limit_str = limit_for(request.method, request.url.path)
    if not limit_str:
        return await call_next(request)

    ip = client_ip(request)
    bucket = "login" if request.url.path == LOGIN_PATH else request.method.upper()
    if not _rate.hit(parse_limit(limit_str), f"ip:{ip}|{bucket}"):
        return JSONResponse(
            status_code=429,
            content={"detail": "Too Many Requests"},
            headers={"X-RateLimit-Limit": limit_str},
        )

    response = await call_next(request)
    response.headers.setdefault("X-RateLimit-Limit", limit_str)
    return response
