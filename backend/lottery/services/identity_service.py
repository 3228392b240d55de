"""Participant identity resolution.

Maps the two correlation signals a client can carry (session PID cookie and a
client-supplied device id) to one stable PID.
"""

from dataclasses import dataclass

from lottery.services.common import Clock, logger, normalize_correlation_id, now_utc
from lottery.services.participant_store import ParticipantStore


@dataclass(frozen=True)
class ResolvedIdentity:
    pid: int
    is_new: bool


class IdentityResolver:
    def __init__(self, store: ParticipantStore, clock: Clock = now_utc):
        self._store = store
        self._clock = clock

    def lookup(self, session_pid: int | None, correlation_id: str | None) -> int | None:
        """Resolve an existing PID without creating one.

        Correlation id wins over the session; a correlation binding that points
        at a PID no longer in the store is discarded.
        """
        corr = normalize_correlation_id(correlation_id)
        with self._store.transaction() as store:
            if corr:
                mapped = store.resolve_correlation(corr)
                if mapped is not None:
                    if store.exists(mapped):
                        return mapped
                    logger.info("stale_correlation_dropped correlation=%s pid=%s", corr, mapped)
                    store.unbind_correlation(corr)

            if session_pid is not None and store.exists(session_pid):
                if corr:
                    store.bind_correlation(corr, session_pid)
                return session_pid
        return None

    def resolve(
        self,
        session_pid: int | None = None,
        correlation_id: str | None = None,
        *,
        create_if_missing: bool = True,
    ) -> ResolvedIdentity | None:
        """Resolve (or allocate) the PID for a request."""
        corr = normalize_correlation_id(correlation_id)
        with self._store.transaction() as store:
            pid = self.lookup(session_pid, corr)
            if pid is not None:
                return ResolvedIdentity(pid=pid, is_new=False)
            if not create_if_missing:
                return None
            participant = store.create(self._clock(), corr)
            return ResolvedIdentity(pid=participant.pid, is_new=True)
