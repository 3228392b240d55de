"""Health check router."""

from fastapi import APIRouter
from lottery.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
@router.get("/api/health", response_model=HealthResponse, include_in_schema=False)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="ok")
