"""Process-wide lottery state.

There is no database: the participant store, round cache, draw policy and
activity state live in memory for the lifetime of the process.
"""

from lottery import config
from lottery.constants import ActivityState
from lottery.services.draw_policy import DrawPolicy
from lottery.services.draw_service import DrawCoordinator
from lottery.services.participant_store import ParticipantStore
from lottery.services.round_cache import RoundCache

_coordinator: DrawCoordinator | None = None


def build_coordinator(**overrides) -> DrawCoordinator:
    max_pid = overrides.pop("max_pid", config.MAX_PID)
    red_count = overrides.pop("red_count", config.DEFAULT_RED_COUNT)
    ttl_seconds = overrides.pop("ttl_seconds", config.ROUND_TTL_SECONDS)
    state = overrides.pop("state", ActivityState(config.INITIAL_ACTIVITY_STATE))
    rng = overrides.pop("rng", None)
    clock_kwargs = {"clock": overrides.pop("clock")} if "clock" in overrides else {}
    if overrides:
        raise TypeError(f"unexpected options: {sorted(overrides)}")

    policy = DrawPolicy(red_count, rng=rng)
    rounds = RoundCache(policy, ttl_seconds=ttl_seconds, **clock_kwargs)
    store = ParticipantStore(max_pid, rounds=rounds)
    return DrawCoordinator(store, policy, rounds, state=state, **clock_kwargs)


def init_state(**overrides) -> DrawCoordinator:
    global _coordinator
    if _coordinator is None:
        _coordinator = build_coordinator(**overrides)
    return _coordinator


def close_state():
    global _coordinator
    _coordinator = None


def get_coordinator() -> DrawCoordinator:
    if _coordinator is None:
        raise RuntimeError("lottery state not initialized")
    return _coordinator
