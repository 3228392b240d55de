"""Dependencies for router injection.

This module provides common dependencies (auth verification, lottery state,
client identity signals) that are shared across routers.
"""

from fastapi import Header, Query, Request, Response

from lottery import config, db
from lottery.services.common import normalize_correlation_id
from lottery.services.draw_service import DrawCoordinator
from lottery.utils.auth import verify_admin_password
from lottery.utils.parsers import _parse_int_optional

# Re-export verify_admin_password for router usage
__all__ = [
    "verify_admin_password",
    "get_admin_user",
    "get_coordinator",
    "get_session_pid",
    "get_client_id",
    "write_session",
]


def get_admin_user(request: Request) -> str:
    """Extract admin user identifier from request."""
    return request.client.host if request.client else "unknown"


def get_coordinator() -> DrawCoordinator:
    return db.get_coordinator()


def get_session_pid(request: Request) -> int | None:
    """PID carried by the session cookie, if any."""
    return _parse_int_optional(request.cookies.get(config.SESSION_COOKIE_NAME))


def get_client_id(
    x_client_id: str | None = Header(default=None),
    cid: str | None = Query(default=None),
) -> str | None:
    """Client-supplied correlation id: header first, then ``cid`` query."""
    return normalize_correlation_id(x_client_id) or normalize_correlation_id(cid)


def write_session(response: Response, pid: int) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=str(pid),
        max_age=config.SESSION_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        path="/",
    )
