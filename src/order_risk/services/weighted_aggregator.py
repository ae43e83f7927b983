"""
Third pipeline stage: turn indicators into points and flags.

Every indicator owns an ordered band table, most severe band first. The first
band whose threshold the value crosses contributes its points and, when the
band carries one, its flag. Tables are evaluated in ``BAND_TABLES`` order,
which is also the order flags appear in the assessment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from order_risk.models.assessment import FraudIndicators

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass(frozen=True)
class Band:
    """One rung of a threshold ladder."""

    threshold: float
    points: int
    flag: Optional[str] = None
    inclusive: bool = False

    def matches(self, value: float) -> bool:
        if self.inclusive:
            return value >= self.threshold
        return value > self.threshold

    def describe(self, value: float) -> Optional[str]:
        return self.flag.format(value=value) if self.flag else None


BAND_TABLES: Tuple[Tuple[str, Tuple[Band, ...]], ...] = (
    (
        "cancel_rate",
        (
            Band(50, 25, "High cancellation rate: {value:.1f}%"),
            Band(30, 15, "Elevated cancellation rate: {value:.1f}%"),
            Band(15, 8),
        ),
    ),
    (
        "return_rate",
        (
            Band(40, 20, "High return rate: {value:.1f}%"),
            Band(25, 12, "Elevated return rate: {value:.1f}%"),
            Band(10, 6),
        ),
    ),
    (
        "issue_rate",
        (
            Band(50, 15, "High issue rate: {value:.1f}%"),
            Band(30, 10),
            Band(15, 5),
        ),
    ),
    # Only the top band is flagged here and for payment failures.
    (
        "high_value_cancellations",
        (
            Band(3, 15, "{value} high-value cancellations", inclusive=True),
            Band(2, 10, inclusive=True),
            Band(1, 5, inclusive=True),
        ),
    ),
    ("rapid_order_pattern", (Band(0, 10, "Rapid order placement detected"),)),
    (
        "address_changes",
        (
            Band(5, 10, "Multiple addresses: {value}"),
            Band(3, 6),
        ),
    ),
    (
        "payment_failures",
        (
            Band(3, 5, "{value} payment failures"),
            Band(1, 3),
        ),
    ),
    ("suspicious_time_pattern", (Band(0, 5, "Unusual ordering time pattern"),)),
)


@dataclass(frozen=True)
class WeightedScore:
    """Aggregate score with the flags raised on the way."""

    score: int
    flags: Tuple[str, ...]
    contributions: Dict[str, int] = field(default_factory=dict)


def clamp(value: float, lo: int = MIN_SCORE, hi: int = MAX_SCORE) -> int:
    return max(lo, min(hi, int(round(value))))


def first_match(bands: Tuple[Band, ...], value: float) -> Optional[Band]:
    """Return the most severe band the value falls in, if any."""
    for band in bands:
        if band.matches(value):
            return band
    return None


def aggregate(indicators: FraudIndicators) -> WeightedScore:
    """Sum band points across all indicators and collect their flags."""
    total = 0
    flags: List[str] = []
    contributions: Dict[str, int] = {}

    for name, bands in BAND_TABLES:
        value = getattr(indicators, name)
        band = first_match(bands, value)
        if band is None:
            contributions[name] = 0
            continue
        total += band.points
        contributions[name] = band.points
        flag = band.describe(value)
        if flag:
            flags.append(flag)

    return WeightedScore(score=clamp(total), flags=tuple(flags), contributions=contributions)
