import asyncio
import logging
from datetime import datetime

from lottery import config
from lottery.constants import ActivityState
from lottery.services.common import now_utc, parse_iso_datetime
from lottery.services.draw_service import DrawCoordinator

logger = logging.getLogger("lottery.worker")


def window_state(
    current: ActivityState,
    now: datetime,
    start_at: datetime | None,
    end_at: datetime | None,
) -> ActivityState:
    """Activity state implied by an optional start/end window."""
    state = current
    if start_at and now < start_at:
        state = ActivityState.WAITING
    if start_at and now >= start_at and (end_at is None or now <= end_at):
        state = ActivityState.CLOSED if current == ActivityState.CLOSED else ActivityState.OPEN
    if end_at and now > end_at:
        state = ActivityState.CLOSED
    return state


def process_once(
    coordinator: DrawCoordinator,
    now: datetime | None = None,
    *,
    start_at: datetime | None = None,
    end_at: datetime | None = None,
) -> dict:
    now = now or now_utc()
    purged = coordinator.rounds.purge_expired()

    current = coordinator.get_activity_state()
    target = current
    if start_at or end_at:
        target = window_state(current, now, start_at, end_at)
        if target != current:
            coordinator.set_activity_state(target)
            logger.info("activity_window_applied from=%s to=%s", current.value, target.value)
    return {"purged_rounds": purged, "state": target.value}


async def run_forever(coordinator: DrawCoordinator, interval: int | None = None):
    start_at = parse_iso_datetime(config.ACTIVITY_START_AT)
    end_at = parse_iso_datetime(config.ACTIVITY_END_AT)
    interval = interval or config.WORKER_INTERVAL_SECONDS
    while True:
        try:
            process_once(coordinator, start_at=start_at, end_at=end_at)
        except Exception:
            # Keep purging and applying the window on the next tick.
            logger.exception("worker_iteration_failed")
        await asyncio.sleep(interval)
