"""Round cache for the two-phase deal/pick flow.

``deal`` stores a freshly generated arrangement under a new token; ``pick``
resolves it exactly once. Lookup and removal happen under one lock, so two
concurrent picks of the same token cannot both succeed.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Dict
import logging
import threading

from lottery.constants import TILE_COUNT, TileFace
from lottery.errors import InvalidIndex, RoundNotFound
from lottery.models import Round
from lottery.services.common import Clock, generate_round_token, now_utc
from lottery.services.draw_policy import DrawPolicy

logger = logging.getLogger("lottery.rounds")


@dataclass(frozen=True)
class PickOutcome:
    win: bool
    face: TileFace
    round: Round


def validate_index(index, error=InvalidIndex) -> int:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < TILE_COUNT:
        raise error(f"index must be within [0, {TILE_COUNT - 1}]")
    return index


class RoundCache:
    def __init__(self, policy: DrawPolicy, *, ttl_seconds: int = 300, clock: Clock = now_utc):
        self._policy = policy
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._rounds: Dict[str, Round] = {}
        self._lock = threading.Lock()

    def deal(self) -> Round:
        arrangement = self._policy.generate_arrangement()
        with self._lock:
            token = generate_round_token()
            while token in self._rounds:
                token = generate_round_token()
            rnd = Round(round_token=token, arrangement=arrangement, created_at=self._clock())
            self._rounds[token] = rnd
        logger.info("round_dealt round=%s faces=%s", token, [f.value for f in arrangement])
        return rnd

    def _is_expired(self, rnd: Round) -> bool:
        return self._clock() - rnd.created_at > self._ttl

    def pick(self, round_token: str | None, index) -> PickOutcome:
        """Resolve ``index`` against the round and delete it."""
        with self._lock:
            rnd = self._rounds.get(round_token) if round_token else None
            if rnd is not None and self._is_expired(rnd):
                del self._rounds[round_token]
                logger.info("round_expired round=%s", round_token)
                rnd = None
            if rnd is None:
                raise RoundNotFound(f"round {round_token!r} not found")
            validate_index(index)
            del self._rounds[round_token]

        face = rnd.arrangement[index]
        win = face == TileFace.WINNING
        logger.info("round_picked round=%s index=%s face=%s win=%s", round_token, index, face.value, win)
        return PickOutcome(win=win, face=face, round=rnd)

    def purge_expired(self) -> int:
        with self._lock:
            expired = [token for token, rnd in self._rounds.items() if self._is_expired(rnd)]
            for token in expired:
                del self._rounds[token]
        if expired:
            logger.info("rounds_purged count=%s", len(expired))
        return len(expired)

    def clear(self) -> int:
        with self._lock:
            count = len(self._rounds)
            self._rounds.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._rounds)

    def __contains__(self, round_token: str) -> bool:
        with self._lock:
            return round_token in self._rounds
