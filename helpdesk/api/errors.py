import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from helpdesk.core import exceptions as domain_exceptions

logger = structlog.get_logger(__name__)


def _http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # 先頭のエラーだけ "field: message" で返す（FastAPI 既定の冗長なリストは返さない）
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = first.get("msg", "Unprocessable Entity")
        detail = f"{loc}: {message}" if loc else message
    else:
        detail = "Unprocessable Entity"
    return JSONResponse(status_code=422, content={"detail": detail})


def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", error=exc.__class__.__name__, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def _domain_error_handler(status_code: int, default_detail: str):
    def _handler(_: Request, exc: domain_exceptions.DomainError) -> JSONResponse:
        detail = str(exc) or default_detail
        return JSONResponse(status_code=status_code, content={"detail": detail})

    return _handler


# NotFoundOrForbiddenError は NotFoundError のサブクラスなので 404 に落ちる
_DOMAIN_STATUS: tuple[tuple[type[domain_exceptions.DomainError], int, str], ...] = (
    (domain_exceptions.NotFoundError, 404, "Not Found"),
    (domain_exceptions.ValidationError, 400, "Bad Request"),
    (domain_exceptions.AuthenticationError, 401, "Unauthorized"),
    (domain_exceptions.InvalidStateError, 409, "Conflict"),
    (domain_exceptions.ConflictError, 409, "Conflict"),
    (domain_exceptions.InfrastructureError, 503, "Service Unavailable"),
)


def install(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    for exc_type, status_code, default_detail in _DOMAIN_STATUS:
        app.add_exception_handler(exc_type, _domain_error_handler(status_code, default_detail))
    app.add_exception_handler(Exception, _unhandled_exception_handler)
