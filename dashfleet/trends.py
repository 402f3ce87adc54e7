# dashfleet/trends.py
#
# Weekly fleet-level series for the dashboard cards:
#   - average health trend (clamped, decaying week over week)
#   - predicted failures split across four weeks, reshuffled per month

import random
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

import numpy as np
import pandas as pd

from dashfleet.prng import hash_to_seed, prng
from dashfleet.synthesis import Vehicle

WEEK_LABELS = ("Week 1", "Week 2", "Week 3", "Week 4")

HEALTH_FLOOR = 60.0
HEALTH_CEILING = 100.0
HEALTH_NOISE = 3.0
HEALTH_DECAY_STEP = 1.5

EMPTY_FLEET_FAILURE_ESTIMATE = 0

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class TrendPoint:
    label: str
    value: float


@dataclass(frozen=True)
class MonthCursor:
    year: int
    month: int  # 1-12

    @classmethod
    def containing(cls, day) -> "MonthCursor":
        return cls(day.year, day.month)

    def previous(self) -> "MonthCursor":
        if self.month == 1:
            return MonthCursor(self.year - 1, 12)
        return MonthCursor(self.year, self.month - 1)

    def next(self) -> "MonthCursor":
        if self.month == 12:
            return MonthCursor(self.year + 1, 1)
        return MonthCursor(self.year, self.month + 1)

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    def seed(self, salt: str = "") -> int:
        return hash_to_seed(f"{salt}|{self.year:04d}-{self.month:02d}")


# -------------------------------------------------
# Health trend
# -------------------------------------------------


def health_trend(
    avg_health: Optional[float],
    rand: Optional[Callable[[], float]] = None,
    floor: float = HEALTH_FLOOR,
    noise: float = HEALTH_NOISE,
    decay_step: float = HEALTH_DECAY_STEP,
) -> List[TrendPoint]:
    """
    Four weekly points around the fleet average, drifting down by
    ``decay_step`` per week with +/- ``noise`` jitter, clamped to
    [floor, 100]. An empty fleet (``avg_health`` None) sits at the floor.
    """
    if avg_health is None or not np.isfinite(avg_health):
        return [TrendPoint(label, float(floor)) for label in WEEK_LABELS]

    rand = rand or random.random
    points = []
    for idx, label in enumerate(WEEK_LABELS):
        jitter = (rand() * 2.0 - 1.0) * noise
        value = float(np.clip(avg_health + jitter - idx * decay_step, floor, HEALTH_CEILING))
        points.append(TrendPoint(label, round(value, 1)))
    return points


# -------------------------------------------------
# Failure trend
# -------------------------------------------------


def fleet_failure_total(vehicles: Iterable[Vehicle]) -> int:
    vehicles = list(vehicles)
    if not vehicles:
        return EMPTY_FLEET_FAILURE_ESTIMATE
    return sum(max(0, v.issues) for v in vehicles)


def split_failures(total: int, buckets: int = len(WEEK_LABELS)) -> List[int]:
    total = max(0, int(total))
    base, remainder = divmod(total, buckets)
    return [base + (1 if i < remainder else 0) for i in range(buckets)]


def redistribute(counts: List[int], seed: int) -> List[int]:
    """Shift single units between neighbouring weeks; the total never changes."""
    out = list(counts)
    rand = prng(seed)
    for i in range(len(out) - 1):
        draw = rand()
        if draw < 0.5 and out[i] > 0:
            out[i] -= 1
            out[i + 1] += 1
        elif draw >= 0.5 and out[i + 1] > 0:
            out[i + 1] -= 1
            out[i] += 1
    return out


def failure_trend(total: int, cursor: Optional[MonthCursor] = None) -> List[TrendPoint]:
    counts = split_failures(total)
    if cursor is not None:
        counts = redistribute(counts, cursor.seed("failures"))
    return [TrendPoint(label, float(c)) for label, c in zip(WEEK_LABELS, counts)]


def trend_frame(points: List[TrendPoint], column: str = "value") -> pd.DataFrame:
    """Chart-ready frame with the week labels as the index."""
    df = pd.DataFrame({"week": [p.label for p in points], column: [p.value for p in points]})
    return df.set_index("week")


def month_rand(cursor: MonthCursor, salt: str) -> Callable[[], float]:
    """Generator seeded by the displayed month, so reruns don't jitter."""
    return prng(cursor.seed(salt))
