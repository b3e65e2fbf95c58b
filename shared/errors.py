"""
Shared error handling for the pricing services.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class PricingException(Exception):
    """Base exception for pricing services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(PricingException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class PriceServiceError(PricingException):
    """The underlying price service failed for an item code."""

    def __init__(self, item_code: str, reason: str, details: Optional[Dict[str, Any]] = None):
        self.item_code = item_code
        super().__init__(
            "PRICE_SERVICE_ERROR",
            f"getting price from service: {reason}",
            {"item_code": item_code, **(details or {})}
        )


class BatchLookupError(PricingException):
    """A batch lookup failed because at least one item lookup failed."""

    def __init__(self, error: PriceServiceError, requested: int, failed: int):
        self.error = error
        super().__init__(
            "BATCH_LOOKUP_ERROR",
            error.message,
            {"item_code": error.item_code, "requested": requested, "failed": failed}
        )
