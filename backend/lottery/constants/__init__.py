"""
Lottery Constants Package
"""
from .draw_config import (
    ActivityState,
    TileFace,
    TILE_COUNT,
    RED_COUNTS,
    FACE_LABELS,
    DECK_NAMES,
    RED_COUNT_PROBABILITY,
    RED_COUNT_LABELS,
    probability_to_red_count,
    red_count_to_probability,
    red_count_label,
)

__all__ = [
    "ActivityState",
    "TileFace",
    "TILE_COUNT",
    "RED_COUNTS",
    "FACE_LABELS",
    "DECK_NAMES",
    "RED_COUNT_PROBABILITY",
    "RED_COUNT_LABELS",
    "probability_to_red_count",
    "red_count_to_probability",
    "red_count_label",
]
