"""
Handler for POST /customers/risk-assessment.

The body is a customer history document assembled upstream. Malformed
records are rejected here with a 422 so the scoring engine only ever sees
validated input.
"""

from __future__ import annotations

import json
import uuid
from typing import Dict, Optional

from pydantic import ValidationError

from order_risk.models.history import CustomerHistory
from order_risk.utils.error_handling import ExternalDataError, to_response
from order_risk.utils.logging_config import get_logger

logger = get_logger(__name__)

# Lazy-loaded service so settings are read on first use, not at import
_scoring_service: Optional["RiskScoringService"] = None


def _get_scoring_service():
    """Lazy-load RiskScoringService."""
    global _scoring_service
    if _scoring_service is None:
        from order_risk.services.risk_service import RiskScoringService
        _scoring_service = RiskScoringService()
    return _scoring_service


def _parse_history(event: Dict) -> CustomerHistory:
    """Decode and validate the request body."""
    payload_body = event.get("body")
    try:
        # Allow direct invocation with the history as the event itself.
        if payload_body:
            payload = json.loads(payload_body)
        elif "history" in event:
            payload = event["history"]
        else:
            payload = {}
    except json.JSONDecodeError as exc:
        raise ExternalDataError(f"Body is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise ExternalDataError("Customer history must be a JSON object")

    try:
        return CustomerHistory.model_validate(payload)
    except ValidationError as exc:
        raise ExternalDataError(
            "Invalid customer history",
            errors=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


def lambda_handler(event, context) -> Dict:
    """Validate the history, score it, and return the assessment."""
    correlation_id = str(uuid.uuid4())
    try:
        history = _parse_history(event)
    except ExternalDataError as exc:
        logger.warning(
            "Rejected customer history",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return to_response(exc)

    assessment = _get_scoring_service().assess(history)
    logger.info(
        "Risk assessment served",
        extra={
            "correlation_id": correlation_id,
            "score": assessment.score,
            "risk_tier": assessment.risk_tier.value,
        },
    )
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": assessment.model_dump_json(by_alias=True),
    }
