"""Draw coordination.

Orchestrates join, the single-phase draw and the two-phase deal/pick flow on
top of the participant store, identity resolver, draw policy and round cache,
plus the admin operations on that state.

Per participant: NotJoined -> Joined -> Participated. Participated is
terminal until an admin reset. The check-participated / compute / persist
sequence runs inside one store transaction.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import threading

from lottery.constants import DECK_NAMES, FACE_LABELS, ActivityState, TileFace
from lottery.errors import (
    ActivityNotOpen,
    AlreadyParticipated,
    InvalidActivityState,
    InvalidChoice,
    NoIdentity,
    ParticipantNotFound,
)
from lottery.models import Arrangement, Participant, Round, winning_positions
from lottery.services.common import Clock, logger, normalize_correlation_id, now_utc
from lottery.services.draw_policy import DrawPolicy, parse_win_spec
from lottery.services.identity_service import IdentityResolver
from lottery.services.participant_store import ParticipantStore
from lottery.services.round_cache import RoundCache, validate_index


@dataclass(frozen=True)
class JoinResult:
    pid: int
    participated: bool
    win: bool
    is_new: bool


@dataclass(frozen=True)
class DrawOutcome:
    """Result of a draw or an identity-bound pick, with the full revealed arrangement."""

    pid: Optional[int]
    index: int
    win: bool
    arrangement: Arrangement

    @property
    def face(self) -> TileFace:
        return self.arrangement[self.index]

    @property
    def label(self) -> str:
        return FACE_LABELS[self.face]

    @property
    def deck(self) -> List[str]:
        return [DECK_NAMES[f] for f in self.arrangement]

    @property
    def win_index(self) -> Optional[int]:
        if self.win:
            return self.index
        positions = winning_positions(self.arrangement)
        return positions[0] if positions else None


def parse_activity_state(value: Any) -> ActivityState:
    if isinstance(value, ActivityState):
        return value
    try:
        return ActivityState(str(value).strip().lower())
    except ValueError:
        raise InvalidActivityState(f"unknown activity state {value!r}")


class DrawCoordinator:
    def __init__(
        self,
        store: ParticipantStore,
        policy: DrawPolicy,
        rounds: RoundCache,
        *,
        clock: Clock = now_utc,
        state: ActivityState = ActivityState.WAITING,
    ):
        self.store = store
        self.policy = policy
        self.rounds = rounds
        self.identity = IdentityResolver(store, clock)
        self._clock = clock
        self._state = state
        self._state_lock = threading.Lock()

    # -- activity -------------------------------------------------------

    def get_activity_state(self) -> ActivityState:
        with self._state_lock:
            return self._state

    def set_activity_state(self, state: Any) -> ActivityState:
        new_state = parse_activity_state(state)
        with self._state_lock:
            previous = self._state
            self._state = new_state
        if previous != new_state:
            logger.info("activity_state_changed from=%s to=%s", previous.value, new_state.value)
        return new_state

    def _require_open(self) -> None:
        state = self.get_activity_state()
        if state != ActivityState.OPEN:
            raise ActivityNotOpen(state.value)

    # -- participant flow -----------------------------------------------

    def join(self, correlation_id: str | None = None, session_pid: int | None = None) -> JoinResult:
        with self.store.transaction() as store:
            identity = self.identity.resolve(session_pid, correlation_id)
            participant = store.get(identity.pid)
        return JoinResult(
            pid=participant.pid,
            participated=participant.participated,
            win=participant.win is True,
            is_new=identity.is_new,
        )

    def _participant_for_draw(self, pid: int | None, correlation_id: str | None) -> Participant:
        corr = normalize_correlation_id(correlation_id)
        identity = self.identity.resolve(pid, corr, create_if_missing=corr is not None)
        if identity is None:
            raise NoIdentity("no session and no correlation id")
        participant = self.store.get(identity.pid)
        self.store.verify(participant)
        if participant.participated:
            logger.info("draw_rejected pid=%s reason=already_participated win=%s", participant.pid, participant.win)
            raise AlreadyParticipated(participant.pid, participant.win)
        return participant

    def _record(self, participant: Participant, index: int, arrangement: Arrangement) -> DrawOutcome:
        win = arrangement[index] == TileFace.WINNING
        updated = self.store.record_draw(participant.pid, win, self._clock())
        logger.info(
            "draw_recorded pid=%s index=%s win=%s faces=%s",
            updated.pid, index, win, [f.value for f in arrangement],
        )
        return DrawOutcome(pid=updated.pid, index=index, win=win, arrangement=arrangement)

    def draw(self, pid: int | None, chosen_index: Any, *, correlation_id: str | None = None) -> DrawOutcome:
        """Single-phase draw: generate an arrangement and resolve ``chosen_index`` against it."""
        self._require_open()
        with self.store.transaction():
            participant = self._participant_for_draw(pid, correlation_id)
            index = validate_index(chosen_index, InvalidChoice)
            arrangement = self.policy.generate_arrangement()
            return self._record(participant, index, arrangement)

    def deal(self) -> Round:
        self._require_open()
        return self.rounds.deal()

    def pick(
        self,
        round_token: str | None,
        index: Any,
        *,
        pid: int | None = None,
        correlation_id: str | None = None,
    ) -> DrawOutcome:
        """Resolve a dealt round; bound to a participant when the caller has an identity."""
        corr = normalize_correlation_id(correlation_id)
        if pid is None and corr is None:
            outcome = self.rounds.pick(round_token, index)
            return DrawOutcome(pid=None, index=index, win=outcome.win, arrangement=outcome.round.arrangement)

        self._require_open()
        with self.store.transaction():
            participant = self._participant_for_draw(pid, corr)
            outcome = self.rounds.pick(round_token, index)
            return self._record(participant, index, outcome.round.arrangement)

    # -- admin ----------------------------------------------------------

    def admin_set_win_spec(self, mode: Any = None, probability: Any = None) -> int:
        return self.policy.set_win_spec(parse_win_spec(mode, probability))

    def admin_get_win_spec(self) -> Dict[str, Any]:
        return self.policy.describe()

    def admin_reset_one(self, pid: int) -> Optional[Participant]:
        reset = self.store.reset_one(pid)
        logger.info("participant_reset pid=%s found=%s", pid, reset is not None)
        return reset

    def admin_get_participant(self, pid: int) -> Participant:
        participant = self.store.get(pid)
        if participant is None:
            raise ParticipantNotFound(f"pid {pid} not found")
        return participant

    def admin_reset_all(self) -> int:
        cleared = self.store.reset_all()
        logger.info("store_reset_all participants=%s", cleared)
        return cleared

    def admin_list_participants(self) -> List[Participant]:
        return self.store.list()

    def stats(self, participants: List[Participant] | None = None) -> Dict[str, int]:
        items = self.store.list() if participants is None else participants
        participated = sum(1 for p in items if p.participated)
        return {
            "total": len(items),
            "participated": participated,
            "winners": sum(1 for p in items if p.win is True),
            "pending": len(items) - participated,
        }
