"""Participant store.

Authoritative in-memory table of participants keyed by PID, with a secondary
index from correlation (device) id to PID. PIDs are slots in the ring
``[0, max_pid]``; allocation scans from a rotating cursor.

Every public method takes the store lock. ``transaction()`` exposes the same
(re-entrant) lock so a caller can group several calls into one critical
section; no I/O may happen while it is held.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, List, Optional
import threading

from lottery.errors import StoreCorruption
from lottery.models import Participant
from lottery.services.common import logger, normalize_correlation_id


class ParticipantStore:
    def __init__(self, max_pid: int, *, rounds=None):
        self.max_pid = max_pid
        self._rounds = rounds
        self._participants: Dict[int, Participant] = {}
        self._correlations: Dict[str, int] = {}
        self._cursor = 0
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator["ParticipantStore"]:
        with self._lock:
            yield self

    # -- allocation -----------------------------------------------------

    def allocate(self) -> int:
        """Reserve the next free PID starting at the cursor."""
        with self._lock:
            size = self.max_pid + 1
            for i in range(size):
                candidate = (self._cursor + i) % size
                if candidate not in self._participants:
                    self._cursor = (candidate + 1) % size
                    return candidate
            # Ring is full: reuse the cursor slot.
            candidate = self._cursor
            self._cursor = (candidate + 1) % size
            logger.warning(
                "pid_ring_saturated pid=%s max_pid=%s live=%s",
                candidate, self.max_pid, len(self._participants),
            )
            return candidate

    def create(self, now: datetime, correlation_id: str | None = None) -> Participant:
        """Allocate a PID and store a fresh participant in one step."""
        with self._lock:
            pid = self.allocate()
            evicted = self._participants.pop(pid, None)
            if evicted is not None and evicted.correlation_id:
                self._correlations.pop(evicted.correlation_id, None)
            participant = Participant(pid=pid, joined_at=now)
            self._participants[pid] = participant
            corr = normalize_correlation_id(correlation_id)
            if corr:
                self.bind_correlation(corr, pid)
            logger.info("participant_created pid=%s correlation=%s", pid, corr)
            return participant.snapshot()

    # -- records --------------------------------------------------------

    def get(self, pid: int | None) -> Optional[Participant]:
        if pid is None:
            return None
        with self._lock:
            participant = self._participants.get(pid)
            return participant.snapshot() if participant else None

    def exists(self, pid: int | None) -> bool:
        if pid is None:
            return False
        with self._lock:
            return pid in self._participants

    @staticmethod
    def verify(participant: Participant) -> None:
        try:
            participant.check_invariants()
        except StoreCorruption:
            logger.error("store_corruption pid=%s record=%r", participant.pid, participant)
            raise

    def put(self, participant: Participant) -> None:
        """Upsert a participant record (stored as a copy)."""
        self.verify(participant)
        with self._lock:
            self._participants[participant.pid] = participant.snapshot()

    def record_draw(self, pid: int, win: bool, now: datetime) -> Participant:
        """Mark ``pid`` as participated with ``win`` in a single update."""
        with self._lock:
            current = self._participants[pid]
            updated = current.snapshot()
            updated.participated = True
            updated.win = win
            updated.draw_at = now
            self.verify(updated)
            self._participants[pid] = updated
            return updated.snapshot()

    def list(self) -> List[Participant]:
        """Snapshot of every participant ordered by PID."""
        with self._lock:
            return [self._participants[pid].snapshot() for pid in sorted(self._participants)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._participants)

    # -- correlation index ----------------------------------------------

    def bind_correlation(self, correlation_id: str, pid: int) -> None:
        """Bind ``correlation_id`` to ``pid``, dropping any older binding of either."""
        with self._lock:
            participant = self._participants.get(pid)
            if participant is None:
                raise KeyError(pid)
            previous_pid = self._correlations.get(correlation_id)
            if previous_pid is not None and previous_pid != pid:
                other = self._participants.get(previous_pid)
                if other is not None and other.correlation_id == correlation_id:
                    other.correlation_id = None
            if participant.correlation_id and participant.correlation_id != correlation_id:
                self._correlations.pop(participant.correlation_id, None)
            participant.correlation_id = correlation_id
            self._correlations[correlation_id] = pid

    def resolve_correlation(self, correlation_id: str | None) -> Optional[int]:
        if not correlation_id:
            return None
        with self._lock:
            return self._correlations.get(correlation_id)

    def unbind_correlation(self, correlation_id: str) -> None:
        with self._lock:
            pid = self._correlations.pop(correlation_id, None)
            participant = self._participants.get(pid) if pid is not None else None
            if participant is not None and participant.correlation_id == correlation_id:
                participant.correlation_id = None

    # -- resets ---------------------------------------------------------

    def reset_one(self, pid: int) -> Optional[Participant]:
        """Clear participation fields of ``pid``; identity and join time are kept.

        Returns the reset record, or None when ``pid`` is not live.
        """
        with self._lock:
            participant = self._participants.get(pid)
            if participant is None:
                return None
            updated = participant.snapshot()
            updated.participated = False
            updated.win = None
            updated.draw_at = None
            self._participants[pid] = updated
            return updated.snapshot()

    def reset_all(self) -> int:
        """Drop every participant, correlation binding and open round.

        The cursor keeps its position so PIDs held in old session cookies are
        not handed to the next joiners.
        """
        with self._lock:
            cleared = len(self._participants)
            self._participants.clear()
            self._correlations.clear()
            if self._rounds is not None:
                self._rounds.clear()
            return cleared
