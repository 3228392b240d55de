"""Draw policy.

Holds the one canonical win specification (``red_count``: winning tiles out
of three) and deals arrangements from it. Admin input arrives either as an
explicit count or as a probability; each form is a ``WinSpec`` strategy that
converts to a ``red_count`` before it reaches the policy.
"""

from dataclasses import dataclass
from typing import Any
import logging
import math
import random
import threading

from lottery.constants import (
    RED_COUNTS,
    TILE_COUNT,
    TileFace,
    probability_to_red_count,
    red_count_label,
    red_count_to_probability,
)
from lottery.errors import InvalidWinSpec
from lottery.models import Arrangement, validate_arrangement

logger = logging.getLogger("lottery.policy")


class WinSpec:
    """Admin-supplied win specification."""

    def red_count(self) -> int:
        raise NotImplementedError


@dataclass(frozen=True)
class CountWinSpec(WinSpec):
    count: int

    def red_count(self) -> int:
        return self.count


@dataclass(frozen=True)
class ProbabilityWinSpec(WinSpec):
    probability: float

    def red_count(self) -> int:
        return probability_to_red_count(self.probability)


def parse_win_spec(mode: Any = None, probability: Any = None) -> WinSpec:
    """Pick the strategy matching the admin input; ``mode`` takes precedence."""
    if mode is not None and not isinstance(mode, bool):
        try:
            count = float(mode)
        except (TypeError, ValueError):
            count = None
        if count is not None and count.is_integer() and int(count) in RED_COUNTS:
            return CountWinSpec(int(count))
        if probability is None:
            raise InvalidWinSpec("mode must be 0, 1, 2 or 3")

    if probability is not None and not isinstance(probability, bool):
        try:
            p = float(probability)
        except (TypeError, ValueError):
            raise InvalidWinSpec("probability must be a number")
        if math.isnan(p) or p < 0.0 or p > 1.0:
            raise InvalidWinSpec("probability must be within [0, 1]")
        return ProbabilityWinSpec(p)

    raise InvalidWinSpec("need mode (0|1|2|3) or probability (0~1)")


class DrawPolicy:
    def __init__(self, red_count: int = 1, rng: random.Random | None = None):
        if red_count not in RED_COUNTS:
            raise InvalidWinSpec(f"red_count {red_count!r} out of range")
        self._red_count = red_count
        self._rng = rng or random.Random()
        self._lock = threading.Lock()

    def current_win_spec(self) -> int:
        with self._lock:
            return self._red_count

    def describe(self) -> dict:
        red_count = self.current_win_spec()
        return {
            "red_count": red_count,
            "probability": red_count_to_probability(red_count),
            "label": red_count_label(red_count),
        }

    def set_win_spec(self, spec: WinSpec) -> int:
        red_count = spec.red_count()
        if red_count not in RED_COUNTS:
            raise InvalidWinSpec(f"red_count {red_count!r} out of range")
        with self._lock:
            previous = self._red_count
            self._red_count = red_count
        logger.info("win_spec_updated spec=%r red_count=%s previous=%s", spec, red_count, previous)
        return red_count

    def generate_arrangement(self) -> Arrangement:
        """Place ``red_count`` winning faces on a uniformly random subset of positions."""
        with self._lock:
            red_count = self._red_count
            winners = set(self._rng.sample(range(TILE_COUNT), red_count))
        faces = tuple(TileFace.WINNING if i in winners else TileFace.BLANK for i in range(TILE_COUNT))
        logger.debug("arrangement_generated red_count=%s faces=%s", red_count, [f.value for f in faces])
        return validate_arrangement(faces, red_count)
