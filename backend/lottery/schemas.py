from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class HealthResponse(BaseModel):
    status: str


class JoinRequest(BaseModel):
    cid: Optional[str] = None


class JoinResponse(BaseModel):
    pid: int
    participated: bool
    win: bool


class DrawRequest(BaseModel):
    choice: Optional[Any] = None
    pick: Optional[Any] = None  # legacy alias of choice
    cid: Optional[str] = None


class DrawResponse(BaseModel):
    ok: bool = True
    pid: int
    win: bool
    is_winner: bool
    label: str
    deck: List[str]
    win_index: Optional[int] = None


class DealResponse(BaseModel):
    round_id: str
    faces: List[str]


class PickRequest(BaseModel):
    round_id: Optional[str] = Field(None, description="token returned by /deal")
    index: Optional[Any] = None
    cid: Optional[str] = None


class PickResponse(BaseModel):
    pid: Optional[int] = None
    win: bool
    face: str
    faces: List[str]


class LotteryStats(BaseModel):
    total_participants: int
    participated: int
    winners: int


class StatusResponse(BaseModel):
    open: bool
    state: str
    red_count: int
    probability: float
    stats: LotteryStats


class AdminStateRequest(BaseModel):
    state: str = Field(..., description="waiting | open | closed")


class AdminStateResponse(BaseModel):
    ok: bool = True
    state: str


class AdminWinSpecRequest(BaseModel):
    mode: Optional[Any] = Field(None, description="0 | 1 | 2 | 3 winning tiles")
    probability: Optional[Any] = Field(None, description="0 ~ 1, bucketed to a mode")


class AdminWinSpecResponse(BaseModel):
    red_count: int
    probability: float
    label: str


class AdminParticipantItem(BaseModel):
    pid: int
    correlation_id: Optional[str] = None
    correlation_short: Optional[str] = None
    participated: bool
    win: Optional[bool] = None
    status: str
    joined_at: str
    draw_at: Optional[str] = None


class AdminParticipantStats(BaseModel):
    total: int
    participated: int
    winners: int
    pending: int


class AdminParticipantsResponse(BaseModel):
    total: int
    items: List[AdminParticipantItem]
    state: str
    config: Dict[str, Any]
    stats: AdminParticipantStats


class AdminResetOneResponse(BaseModel):
    ok: bool = True
    participant: AdminParticipantItem


class AdminResetAllResponse(BaseModel):
    ok: bool = True
    cleared: int


class AdminMeResponse(BaseModel):
    ok: bool = True
