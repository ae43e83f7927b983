"""Risk assessment output models."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from pydantic import Field

from order_risk.models.base import CamelModel


class RiskTier(str, Enum):
    """Ordinal risk classification."""

    UNKNOWN = "Unknown"
    MINIMAL = "Minimal"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        """Position in the ordering Unknown < Minimal < ... < Critical."""
        return list(RiskTier).index(self)


class RiskColor(str, Enum):
    """Display color paired with each tier."""

    GREY = "grey"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


class FraudIndicators(CamelModel):
    """The eight behavioral signals, each computed independently."""

    cancel_rate: float = 0.0
    return_rate: float = 0.0
    issue_rate: float = 0.0
    high_value_cancellations: int = 0
    rapid_order_pattern: int = Field(default=0, ge=0, le=1)
    address_changes: int = 0
    payment_failures: int = 0
    suspicious_time_pattern: int = Field(default=0, ge=0, le=1)


class RiskAssessment(CamelModel):
    """Result of scoring one customer history."""

    score: int = Field(ge=0, le=100)
    risk_tier: RiskTier
    risk_color: RiskColor
    indicators: FraudIndicators
    flags: Tuple[str, ...]
    total_orders: int = Field(ge=0)
    cancelled_count: int = Field(ge=0)
    return_issue_count: int = Field(ge=0)
    issue_count: int = Field(ge=0)
