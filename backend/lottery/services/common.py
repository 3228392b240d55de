"""Common service utilities and helpers.

Shared functions across services: clock, token generation, input normalization.
"""

from datetime import datetime, timezone
from typing import Callable
import secrets
import logging

from lottery.errors import InvalidClientId


logger = logging.getLogger("lottery.service")

MAX_CORRELATION_ID_LENGTH = 128

Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def generate_round_token() -> str:
    """Generate a unique, unguessable round token."""
    return f"rnd_{secrets.token_urlsafe(12)}"


def normalize_correlation_id(value: str | None) -> str | None:
    """Normalize a client-supplied correlation (device) id."""
    if value is None:
        return None
    v = str(value).strip()
    if len(v) > MAX_CORRELATION_ID_LENGTH:
        raise InvalidClientId(f"client id longer than {MAX_CORRELATION_ID_LENGTH} characters")
    return v or None


def correlation_short(value: str | None) -> str | None:
    """Last three characters of a correlation id, zero padded."""
    if not value:
        return None
    return value[-3:].rjust(3, "0")


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    s = str(value or "").strip()
    if not s:
        return None
    try:
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except ValueError:
        return None
