"""Admin router.

Endpoints for activity state, win spec, participant listing/export and resets.
All routes require the admin password header.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from lottery.schemas import (
    AdminMeResponse,
    AdminParticipantItem,
    AdminParticipantsResponse,
    AdminParticipantStats,
    AdminResetAllResponse,
    AdminResetOneResponse,
    AdminStateRequest,
    AdminStateResponse,
    AdminWinSpecRequest,
    AdminWinSpecResponse,
)
from lottery.routers.dependencies import get_admin_user, get_coordinator, verify_admin_password
from lottery.services.draw_service import DrawCoordinator
from lottery.services.export_service import participant_row, participants_csv
from lottery.utils.audit import _log_admin_action
from lottery.errors import ParticipantNotFound

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(verify_admin_password)])


@router.get("/me", response_model=AdminMeResponse)
async def me():
    return AdminMeResponse()


@router.post("/state", response_model=AdminStateResponse)
async def set_state(
    body: AdminStateRequest,
    request: Request,
    coordinator: DrawCoordinator = Depends(get_coordinator),
):
    state = coordinator.set_activity_state(body.state)
    _log_admin_action(
        admin_user=get_admin_user(request),
        action="SET_STATE",
        endpoint="/api/admin/state",
        target_pids=None,
        request_body={"state": body.state},
        response_status="SUCCESS",
        response_summary={"state": state.value},
    )
    return AdminStateResponse(state=state.value)


@router.get("/state", response_model=AdminStateResponse)
async def get_state(coordinator: DrawCoordinator = Depends(get_coordinator)):
    return AdminStateResponse(state=coordinator.get_activity_state().value)


@router.get("/win-spec", response_model=AdminWinSpecResponse)
async def get_win_spec(coordinator: DrawCoordinator = Depends(get_coordinator)):
    return AdminWinSpecResponse(**coordinator.admin_get_win_spec())


@router.post("/win-spec", response_model=AdminWinSpecResponse)
async def set_win_spec(
    body: AdminWinSpecRequest,
    request: Request,
    coordinator: DrawCoordinator = Depends(get_coordinator),
):
    """Set winning tiles by count (``mode``) or by probability bucket."""
    coordinator.admin_set_win_spec(mode=body.mode, probability=body.probability)
    spec = coordinator.admin_get_win_spec()
    _log_admin_action(
        admin_user=get_admin_user(request),
        action="SET_WIN_SPEC",
        endpoint="/api/admin/win-spec",
        target_pids=None,
        request_body=body.model_dump(),
        response_status="SUCCESS",
        response_summary=spec,
    )
    return AdminWinSpecResponse(**spec)


@router.get("/participants", response_model=AdminParticipantsResponse)
async def list_participants(coordinator: DrawCoordinator = Depends(get_coordinator)):
    participants = coordinator.admin_list_participants()
    return AdminParticipantsResponse(
        total=len(participants),
        items=[AdminParticipantItem(**participant_row(p)) for p in participants],
        state=coordinator.get_activity_state().value,
        config=coordinator.admin_get_win_spec(),
        stats=AdminParticipantStats(**coordinator.stats(participants)),
    )


@router.get("/export")
async def export_participants(coordinator: DrawCoordinator = Depends(get_coordinator)):
    payload = participants_csv(coordinator.admin_list_participants())
    filename = f"lottery_participants_{datetime.now(timezone.utc).strftime('%Y-%m-%d')}.csv"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(iter([payload]), media_type="text/csv; charset=utf-8", headers=headers)


@router.post("/reset/{pid}", response_model=AdminResetOneResponse)
async def reset_one(
    pid: int,
    request: Request,
    coordinator: DrawCoordinator = Depends(get_coordinator),
):
    participant = coordinator.admin_reset_one(pid)
    found = participant is not None
    _log_admin_action(
        admin_user=get_admin_user(request),
        action="RESET_ONE",
        endpoint=f"/api/admin/reset/{pid}",
        target_pids=[pid],
        request_body=None,
        response_status="SUCCESS" if found else "NOT_FOUND",
        response_summary={"reset": found},
    )
    if not found:
        raise ParticipantNotFound(f"pid {pid} not found")
    return AdminResetOneResponse(participant=AdminParticipantItem(**participant_row(participant)))


@router.post("/reset-all", response_model=AdminResetAllResponse)
async def reset_all(request: Request, coordinator: DrawCoordinator = Depends(get_coordinator)):
    cleared = coordinator.admin_reset_all()
    _log_admin_action(
        admin_user=get_admin_user(request),
        action="RESET_ALL",
        endpoint="/api/admin/reset-all",
        target_pids=None,
        request_body=None,
        response_status="SUCCESS",
        response_summary={"cleared": cleared},
    )
    return AdminResetAllResponse(cleared=cleared)
