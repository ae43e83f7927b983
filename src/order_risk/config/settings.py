"""
Environment-specific configuration settings.

Scoring thresholds are fixed constants in the services; only the runtime
concerns (logging, timezone interpretation) are configurable.
"""

from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import os

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_log_level(environment: str) -> str:
    """Quieter logs in production unless LOG_LEVEL says otherwise."""
    return "WARNING" if environment == "prod" else "INFO"


@dataclass(frozen=True)
class Settings:
    """Application settings with local-development defaults."""

    # Environment
    environment: str = "dev"
    service_name: str = "order-risk"

    # Logging
    log_level: str = "INFO"

    # IANA zone used to read the local hour of timezone-aware order timestamps.
    # None keeps each timestamp's own offset.
    order_timezone: Optional[str] = None

    def __post_init__(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown LOG_LEVEL: {self.log_level}")
        if self.order_timezone:
            try:
                ZoneInfo(self.order_timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"Unknown ORDER_TIMEZONE: {self.order_timezone}") from exc

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Resolved zone for local-hour checks, if one is configured."""
        return ZoneInfo(self.order_timezone) if self.order_timezone else None

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")

        return cls(
            environment=env,
            service_name=os.environ.get("SERVICE_NAME", "order-risk"),
            log_level=(os.environ.get("LOG_LEVEL") or default_log_level(env)).upper(),
            order_timezone=os.environ.get("ORDER_TIMEZONE") or None,
        )
