# helpdesk/api/routers/healthz.py
from fastapi import APIRouter

from helpdesk.schemas.common import OkResponse

router = APIRouter(prefix="/healthz", tags=["health"])


@router.get("", response_model=OkResponse, summary="Liveness probe（DBアクセスなし）")
async def healthz():
    return {"ok": True}
