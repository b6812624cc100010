from __future__ import annotations

from fastapi import APIRouter, Depends

from helpdesk.api.deps import get_progress_service
from helpdesk.schemas.common import ErrorResponse
from helpdesk.schemas.progress import ProgressNoteRequest, ProgressOut
from helpdesk.services.progress import ProgressService

router = APIRouter(prefix="/reports", tags=["progress"])


@router.get(
    "/{report_id}/progress",
    response_model=list[ProgressOut],
    summary="タイムライン（新しい順）",
)
async def list_progress(report_id: int, svc: ProgressService = Depends(get_progress_service)):
    return await svc.list_by_report(report_id)


@router.post(
    "/{report_id}/progress/notes",
    response_model=ProgressOut,
    status_code=201,
    summary="メモを追加（ステータスは変えない）",
    responses={404: {"model": ErrorResponse}},
)
async def add_progress_note(
    report_id: int,
    payload: ProgressNoteRequest,
    svc: ProgressService = Depends(get_progress_service),
):
    return await svc.add_note(report_id, payload.notes, payload.admin_id)
