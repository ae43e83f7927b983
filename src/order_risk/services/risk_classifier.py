"""Final pipeline stage: map the score to a tier and close out the flags."""

from __future__ import annotations

from typing import Sequence, Tuple

from order_risk.models.assessment import RiskColor, RiskTier

# Highest threshold first; first match wins.
TIER_TABLE: Tuple[Tuple[int, RiskTier, RiskColor], ...] = (
    (70, RiskTier.CRITICAL, RiskColor.RED),
    (50, RiskTier.HIGH, RiskColor.ORANGE),
    (30, RiskTier.MEDIUM, RiskColor.YELLOW),
    (15, RiskTier.LOW, RiskColor.GREEN),
)

GOOD_HISTORY_FLAG = "Good order history"
NO_INDICATORS_FLAG = "No fraud indicators detected"
GOOD_HISTORY_MAX_SCORE = 30
GOOD_HISTORY_MIN_ORDERS = 5


def classify_score(score: int) -> Tuple[RiskTier, RiskColor]:
    """Return the tier and display color for a score."""
    for threshold, tier, color in TIER_TABLE:
        if score >= threshold:
            return tier, color
    return RiskTier.MINIMAL, RiskColor.GREEN


def finalize_flags(
    flags: Sequence[str], score: int, total_orders: int
) -> Tuple[str, ...]:
    """Append the positive-history and fallback flags after scoring."""
    result = list(flags)
    if score < GOOD_HISTORY_MAX_SCORE and total_orders >= GOOD_HISTORY_MIN_ORDERS:
        result.append(GOOD_HISTORY_FLAG)
    if not result:
        result.append(NO_INDICATORS_FLAG)
    return tuple(result)
