from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from helpdesk.api.deps import get_health_service
from helpdesk.core.startup import is_migration_completed, last_migration_error
from helpdesk.services.health import HealthService

router = APIRouter(prefix="/readyz", tags=["health"])


@router.get(
    "",
    summary="Readiness probe",
    description="DB に SELECT 1 を投げて疎通を確認（マイグレーション完了前は503）",
)
async def readyz(svc: HealthService = Depends(get_health_service)):
    if not is_migration_completed():
        detail = last_migration_error() or "Database migrations are still running"
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": detail}
        )
    return await svc.ok()
