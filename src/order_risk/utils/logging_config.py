"""
Structured logger setup shared across handlers and services.

Loggers are built at import time by every module, so level resolution here
never raises: an unusable LOG_LEVEL falls back to INFO and is reported once
through the logger itself.
"""

import logging
import os
from typing import Optional, Tuple

from pythonjsonlogger import jsonlogger

from order_risk.config.settings import LOG_LEVELS, default_log_level

LOG_FORMAT = "%(levelname)s %(name)s %(service)s %(environment)s %(message)s %(asctime)s"


class ServiceContextFilter(logging.Filter):
    """Stamp every record with the service name and deployment environment."""

    def __init__(self, service: str, environment: str):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment
        return True


def resolve_level() -> Tuple[str, Optional[str]]:
    """Return the level to use and the rejected LOG_LEVEL value, if any."""
    environment = os.environ.get("ENVIRONMENT", "dev")
    requested = (os.environ.get("LOG_LEVEL") or "").strip().upper()
    if not requested:
        return default_log_level(environment), None
    if requested in LOG_LEVELS:
        return requested, None
    return "INFO", requested


def get_logger(name: str) -> logging.Logger:
    """Configure a JSON logger once per name and reuse it."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
    handler.addFilter(
        ServiceContextFilter(
            service=os.environ.get("SERVICE_NAME", "order-risk"),
            environment=os.environ.get("ENVIRONMENT", "dev"),
        )
    )
    logger.addHandler(handler)
    logger.propagate = False

    level, rejected = resolve_level()
    logger.setLevel(level)
    if rejected:
        logger.warning("Unknown LOG_LEVEL; using INFO", extra={"log_level": rejected})
    return logger
