"""Named outcomes for every expected lottery failure.

Each error carries a stable ``code`` (used as the HTTP ``detail``) and a
status hint for the HTTP layer. ``StoreCorruption`` is deliberately not a
``LotteryError``: it must surface as a server fault, never as a result.
"""

from typing import Any, Dict


class LotteryError(Exception):
    code = "LOTTERY_ERROR"
    status_code = 400

    def __init__(self, message: str | None = None, **extra: Any):
        super().__init__(message or self.code)
        self.extra: Dict[str, Any] = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.code, **self.extra}


class ActivityNotOpen(LotteryError):
    code = "ACTIVITY_NOT_OPEN"
    status_code = 403

    def __init__(self, state: str):
        super().__init__(f"activity is {state}", state=state)
        self.state = state


class AlreadyParticipated(LotteryError):
    code = "ALREADY_PARTICIPATED"
    status_code = 409

    def __init__(self, pid: int, win: bool):
        super().__init__(f"pid {pid} already participated", pid=pid, win=win)
        self.pid = pid
        self.win = win


class NoIdentity(LotteryError):
    code = "NO_IDENTITY"
    status_code = 400


class InvalidChoice(LotteryError):
    code = "INVALID_CHOICE"
    status_code = 400


class InvalidIndex(LotteryError):
    code = "INVALID_INDEX"
    status_code = 400


class RoundNotFound(LotteryError):
    code = "ROUND_NOT_FOUND"
    status_code = 404


class InvalidWinSpec(LotteryError):
    code = "INVALID_WIN_SPEC"
    status_code = 400


class InvalidActivityState(LotteryError):
    code = "INVALID_STATE"
    status_code = 400


class ParticipantNotFound(LotteryError):
    code = "PARTICIPANT_NOT_FOUND"
    status_code = 404


class InvalidClientId(LotteryError):
    code = "INVALID_CLIENT_ID"
    status_code = 400


class StoreCorruption(RuntimeError):
    """A participant record violates its invariants."""
