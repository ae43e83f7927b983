"""Runtime configuration."""

from order_risk.config.settings import Settings  # noqa: F401
