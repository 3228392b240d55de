"""In-memory records for participants and dealt rounds."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Tuple

from lottery.constants import TILE_COUNT, TileFace
from lottery.errors import StoreCorruption

Arrangement = Tuple[TileFace, ...]


@dataclass
class Participant:
    pid: int
    joined_at: datetime
    correlation_id: Optional[str] = None
    participated: bool = False
    win: Optional[bool] = None
    draw_at: Optional[datetime] = None

    def snapshot(self) -> "Participant":
        return replace(self)

    def check_invariants(self) -> None:
        """Raise StoreCorruption when the participation fields disagree."""
        if self.participated:
            if self.win is None or self.draw_at is None:
                raise StoreCorruption(f"pid {self.pid} participated without win/draw_at")
            if self.draw_at < self.joined_at:
                raise StoreCorruption(f"pid {self.pid} draw_at precedes joined_at")
        elif self.win is not None or self.draw_at is not None:
            raise StoreCorruption(f"pid {self.pid} has a result but never participated")


@dataclass(frozen=True)
class Round:
    round_token: str
    arrangement: Arrangement
    created_at: datetime


def winning_positions(arrangement: Arrangement) -> list[int]:
    return [i for i, face in enumerate(arrangement) if face == TileFace.WINNING]


def validate_arrangement(arrangement: Arrangement, red_count: int) -> Arrangement:
    if len(arrangement) != TILE_COUNT or len(winning_positions(arrangement)) != red_count:
        raise StoreCorruption(f"arrangement {arrangement!r} does not hold {red_count} winning tiles")
    return arrangement
