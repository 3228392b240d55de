"""
Draw Configuration - Source of Truth (SOT)
==========================================
All tile / win-spec constants live here. Admin UIs round-trip
mode <-> probability through the tables below, so change them only here.
"""

from enum import Enum

# =============================================================================
# 1. ENUMS
# =============================================================================

class ActivityState(str, Enum):
    """Activity lifecycle (admin driven)"""
    WAITING = "waiting"
    OPEN = "open"
    CLOSED = "closed"


class TileFace(str, Enum):
    """Face of a single tile"""
    WINNING = "zhong"
    BLANK = "blank"


# =============================================================================
# 2. Tiles
# =============================================================================

TILE_COUNT: int = 3
RED_COUNTS: tuple[int, ...] = (0, 1, 2, 3)

# Labels shown to players and used in the draw response deck
FACE_LABELS: dict[TileFace, str] = {
    TileFace.WINNING: "红中",
    TileFace.BLANK: "白板",
}

DECK_NAMES: dict[TileFace, str] = {
    TileFace.WINNING: "hongzhong",
    TileFace.BLANK: "baiban",
}


# =============================================================================
# 3. Win spec tables
# =============================================================================

# Win probability of an arbitrarily chosen tile for each red_count
RED_COUNT_PROBABILITY: dict[int, float] = {
    0: 0.0,
    1: 1 / 3,
    2: 2 / 3,
    3: 1.0,
}

RED_COUNT_LABELS: dict[int, str] = {
    0: "0%",
    1: "33%",
    2: "66%",
    3: "100%",
}

# Bucket edges for probability -> red_count
PROBABILITY_NONE_MAX: float = 0.01   # p <= 0.01 -> 0
PROBABILITY_ONE_MAX: float = 0.5     # p <  0.5  -> 1
PROBABILITY_TWO_MAX: float = 0.99    # p <  0.99 -> 2, else 3


# =============================================================================
# 4. Helpers
# =============================================================================

def probability_to_red_count(probability: float) -> int:
    """Map a probability in [0, 1] to its red_count bucket."""
    p = float(probability)
    if p <= PROBABILITY_NONE_MAX:
        return 0
    if p < PROBABILITY_ONE_MAX:
        return 1
    if p < PROBABILITY_TWO_MAX:
        return 2
    return 3


def red_count_to_probability(red_count: int) -> float:
    return RED_COUNT_PROBABILITY[red_count]


def red_count_label(red_count: int) -> str:
    return RED_COUNT_LABELS[red_count]
