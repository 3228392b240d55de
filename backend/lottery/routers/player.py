"""Lottery player-facing router.

Endpoints for join, single-phase draw, deal/pick and activity status.
"""

from fastapi import APIRouter, Depends, Response

from lottery.constants import ActivityState, red_count_to_probability
from lottery.schemas import (
    DealResponse,
    DrawRequest,
    DrawResponse,
    JoinRequest,
    JoinResponse,
    LotteryStats,
    PickRequest,
    PickResponse,
    StatusResponse,
)
from lottery.routers.dependencies import (
    get_client_id,
    get_coordinator,
    get_session_pid,
    write_session,
)
from lottery.services.common import normalize_correlation_id
from lottery.services.draw_service import DrawCoordinator
from lottery.utils.parsers import _parse_index

router = APIRouter(prefix="/api/lottery", tags=["lottery"])


@router.post("/join", response_model=JoinResponse)
async def join(
    response: Response,
    body: JoinRequest | None = None,
    session_pid: int | None = Depends(get_session_pid),
    client_id: str | None = Depends(get_client_id),
    coordinator: DrawCoordinator = Depends(get_coordinator),
):
    """Join (or re-join) the activity and refresh the session cookie."""
    correlation_id = client_id or normalize_correlation_id(body.cid if body else None)
    result = coordinator.join(correlation_id=correlation_id, session_pid=session_pid)
    write_session(response, result.pid)
    return JoinResponse(pid=result.pid, participated=result.participated, win=result.win)


@router.post("/draw", response_model=DrawResponse)
async def draw(
    response: Response,
    body: DrawRequest | None = None,
    session_pid: int | None = Depends(get_session_pid),
    client_id: str | None = Depends(get_client_id),
    coordinator: DrawCoordinator = Depends(get_coordinator),
):
    body = body or DrawRequest()
    choice = body.choice if body.choice is not None else body.pick
    correlation_id = client_id or normalize_correlation_id(body.cid)

    outcome = coordinator.draw(session_pid, _parse_index(choice), correlation_id=correlation_id)
    if outcome.pid != session_pid:
        write_session(response, outcome.pid)
    return DrawResponse(
        pid=outcome.pid,
        win=outcome.win,
        is_winner=outcome.win,
        label=outcome.label,
        deck=outcome.deck,
        win_index=outcome.win_index,
    )


@router.post("/deal", response_model=DealResponse)
async def deal(coordinator: DrawCoordinator = Depends(get_coordinator)):
    rnd = coordinator.deal()
    return DealResponse(round_id=rnd.round_token, faces=[f.value for f in rnd.arrangement])


@router.post("/pick", response_model=PickResponse)
async def pick(
    body: PickRequest,
    response: Response,
    session_pid: int | None = Depends(get_session_pid),
    client_id: str | None = Depends(get_client_id),
    coordinator: DrawCoordinator = Depends(get_coordinator),
):
    """Resolve a dealt round; bound to the caller's participant when one is known."""
    correlation_id = client_id or normalize_correlation_id(body.cid)
    outcome = coordinator.pick(
        body.round_id,
        _parse_index(body.index),
        pid=session_pid,
        correlation_id=correlation_id,
    )
    if outcome.pid is not None and outcome.pid != session_pid:
        write_session(response, outcome.pid)
    return PickResponse(
        pid=outcome.pid,
        win=outcome.win,
        face=outcome.face.value,
        faces=[f.value for f in outcome.arrangement],
    )


@router.get("/status", response_model=StatusResponse)
async def status(coordinator: DrawCoordinator = Depends(get_coordinator)):
    state = coordinator.get_activity_state()
    red_count = coordinator.policy.current_win_spec()
    stats = coordinator.stats()
    return StatusResponse(
        open=state == ActivityState.OPEN,
        state=state.value,
        red_count=red_count,
        probability=red_count_to_probability(red_count),
        stats=LotteryStats(
            total_participants=stats["total"],
            participated=stats["participated"],
            winners=stats["winners"],
        ),
    )
