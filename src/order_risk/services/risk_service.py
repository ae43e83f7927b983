"""
Risk scoring service.

Runs normalize -> extract -> aggregate -> classify over one customer
history. The service holds only configuration, so a single instance can be
shared across concurrent callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from order_risk.config.settings import Settings
from order_risk.models.assessment import (
    FraudIndicators,
    RiskAssessment,
    RiskColor,
    RiskTier,
)
from order_risk.models.history import CustomerHistory
from order_risk.services.history_normalizer import NormalizedHistory, normalize_history
from order_risk.services.indicator_extractor import extract_indicators
from order_risk.services.risk_classifier import classify_score, finalize_flags
from order_risk.services.weighted_aggregator import aggregate
from order_risk.utils.logging_config import get_logger

logger = get_logger(__name__)

NEW_CUSTOMER_FLAG = "New customer — insufficient data"


@dataclass
class RiskScoringService:
    """Composes the scoring stages into a single call."""

    settings: Settings = field(default_factory=Settings.from_environment)

    def assess(
        self, history: Union[CustomerHistory, Mapping[str, Any]]
    ) -> RiskAssessment:
        """Score one customer history."""
        normalized = normalize_history(history)
        if normalized.is_empty:
            return self._new_customer(normalized)

        extraction = extract_indicators(normalized, tz=self.settings.tzinfo)
        weighted = aggregate(extraction.indicators)
        tier, color = classify_score(weighted.score)

        assessment = RiskAssessment(
            score=weighted.score,
            risk_tier=tier,
            risk_color=color,
            indicators=extraction.indicators,
            flags=finalize_flags(weighted.flags, weighted.score, normalized.total_orders),
            total_orders=normalized.total_orders,
            cancelled_count=extraction.cancelled_count,
            return_issue_count=extraction.return_issue_count,
            issue_count=len(normalized.issues),
        )

        logger.debug("Band contributions", extra={"contributions": weighted.contributions})
        logger.info(
            "Risk assessed",
            extra={
                "score": assessment.score,
                "risk_tier": assessment.risk_tier.value,
                "total_orders": assessment.total_orders,
            },
        )
        return assessment

    def _new_customer(self, normalized: NormalizedHistory) -> RiskAssessment:
        """Short-circuit for customers with no orders yet."""
        logger.info("No order history; skipping scoring")
        return RiskAssessment(
            score=0,
            risk_tier=RiskTier.UNKNOWN,
            risk_color=RiskColor.GREY,
            indicators=FraudIndicators(),
            flags=(NEW_CUSTOMER_FLAG,),
            total_orders=0,
            cancelled_count=0,
            return_issue_count=sum(1 for i in normalized.issues if i.is_return),
            issue_count=len(normalized.issues),
        )


def assess_risk(
    history: Union[CustomerHistory, Mapping[str, Any]],
    settings: Optional[Settings] = None,
) -> RiskAssessment:
    """Convenience wrapper for one-off scoring."""
    return RiskScoringService(settings=settings or Settings.from_environment()).assess(history)
