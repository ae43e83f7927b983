"""Lightweight health check handler."""

import json
from datetime import datetime, timezone

from order_risk import __version__
from order_risk.config.settings import Settings


def lambda_handler(event, context):
    """Return a simple 200 response to verify the service is alive."""
    settings = Settings.from_environment()
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(
            {
                "status": "ok",
                "service": settings.service_name,
                "version": __version__,
                "environment": settings.environment,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        ),
    }
