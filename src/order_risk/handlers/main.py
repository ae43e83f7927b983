"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.
"""

from typing import Callable, Tuple

from order_risk.handlers import health_check, risk_assessment
from order_risk.utils.error_handling import NotFoundError, to_response


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    Routes are matched on "<METHOD> <path>" exactly, with a trailing slash
    ignored.
    """
    http = event.get("requestContext", {}).get("http", {})
    method = http.get("method", "").upper()
    path = http.get("path", "").rstrip("/") or "/"
    route_key = f"{method} {path}"

    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("POST /customers/risk-assessment", risk_assessment.lambda_handler),
    )

    for key, handler in route_table:
        if route_key == key:
            return handler(event, context)

    return to_response(NotFoundError(f"Route not found: {route_key}"))
