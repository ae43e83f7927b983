"""Pydantic models for customer history input and risk assessment output."""

from order_risk.models.assessment import (  # noqa: F401
    FraudIndicators,
    RiskAssessment,
    RiskColor,
    RiskTier,
)
from order_risk.models.history import (  # noqa: F401
    CustomerHistory,
    Issue,
    Order,
    OrderStatus,
    PaymentStatus,
)
