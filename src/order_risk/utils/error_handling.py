"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested route or resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ExternalDataError(AppError):
    """
    Raised when an upstream customer history is malformed.

    Missing timestamps, non-numeric totals and unknown status spellings are
    rejected here, before the record reaches the scoring engine.
    """

    def __init__(
        self,
        message: str = "Invalid customer history",
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message, status_code=422)
        self.errors = errors or []


def to_response(error: AppError) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body: Dict[str, Any] = {"message": str(error), "status": "error"}
    if isinstance(error, ExternalDataError) and error.errors:
        body["errors"] = error.errors
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, default=str),
    }
