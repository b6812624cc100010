from __future__ import annotations

from collections.abc import Callable

from fastapi import Request, Response

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


async def security_headers_middleware(request: Request, call_next: Callable) -> Response:
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    # CSV エクスポートは個人情報（NISN）を含むためキャッシュさせない
    if request.url.path.startswith("/export"):
        response.headers.setdefault("Cache-Control", "no-store")
    return response
