import os
from contextlib import asynccontextmanager

import sentry_sdk
import structlog
from fastapi import FastAPI
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.cors import CORSMiddleware

from helpdesk.api import errors
from helpdesk.api.routers.auth import router as auth_router
from helpdesk.api.routers.categories import router as categories_router
from helpdesk.api.routers.dashboard import router as dashboard_router
from helpdesk.api.routers.export import router as export_router
from helpdesk.api.routers.healthz import router as healthz_router
from helpdesk.api.routers.progress import router as progress_router
from helpdesk.api.routers.readyz import router as readyz_router
from helpdesk.api.routers.reports import router as reports_router
from helpdesk.api.routers.users import router as users_router
from helpdesk.core.config import get_settings
from helpdesk.core.startup import run_database_migrations
from helpdesk.logging import setup_logging
from helpdesk.middleware.rate_limit import rate_limit_middleware
from helpdesk.middleware.request_id import request_id_middleware
from helpdesk.middleware.security_headers import security_headers_middleware


def _init_sentry(env: str) -> None:
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return
    # traces_sample_rate は [0.0, 0.2] に丸める
    try:
        rate_raw = float(os.getenv("SENTRY_TRACES_RATE", "0"))
    except ValueError:
        rate_raw = 0.0
    sentry_sdk.init(
        dsn=dsn,
        environment=env,
        release=os.getenv("RELEASE"),
        integrations=[StarletteIntegration()],
        traces_sample_rate=max(0.0, min(0.2, rate_raw)),
        send_default_pii=False,
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    run_database_migrations()
    yield


def create_app() -> FastAPI:
    setup_logging()
    settings = get_settings()
    _init_sentry(settings.app_env)

    app = FastAPI(title="Madrasah Helpdesk", lifespan=lifespan)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(rate_limit_middleware)

    if settings.origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS", "HEAD"],
            allow_headers=["*"],
        )

    errors.install(app)
    for router in (
        healthz_router,
        readyz_router,
        auth_router,
        users_router,
        categories_router,
        reports_router,
        progress_router,
        dashboard_router,
        export_router,
    ):
        app.include_router(router)

    @app.get("/health")
    def health():
        return {"status": "ok", "env": settings.app_env}

    structlog.get_logger(__name__).info("app_startup", env=settings.app_env)
    return app


app = create_app()
