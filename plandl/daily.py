from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from .catalog import Aircraft, Catalog

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def day_seed(d: date) -> int:
    """Integer seed for a calendar day, e.g. 2024-03-15 -> 20240315."""

    return d.year * 10000 + d.month * 100 + d.day


class SeededLcg:
    """Linear-congruential stream seeded from the day.

    The recurrence and modulus are fixed so that every client picks the same
    aircraft and crop for a given date.
    """

    def __init__(self, seed: int) -> None:
        self._seed = int(seed)

    @property
    def state(self) -> int:
        return self._seed

    def next(self) -> float:
        """Advance the stream and return a value in [0, 1)."""

        self._seed = (self._seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._seed / LCG_MODULUS


@dataclass(frozen=True, slots=True)
class DailyAnswer:
    day_seed: int
    index: int
    aircraft: Aircraft
    offset_x: float  # percent, 0..100
    offset_y: float


def select_daily_answer(catalog: Catalog, d: date) -> DailyAnswer:
    if len(catalog) == 0:
        raise ValueError("catalog must not be empty")

    seed = day_seed(d)
    rng = SeededLcg(seed)
    index = min(int(math.floor(rng.next() * len(catalog))), len(catalog) - 1)
    offset_x = rng.next() * 100.0
    offset_y = rng.next() * 100.0
    return DailyAnswer(
        day_seed=seed,
        index=index,
        aircraft=catalog[index],
        offset_x=offset_x,
        offset_y=offset_y,
    )
