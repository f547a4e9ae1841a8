"""
AI Optimizer - Core Error Types

Defines the exception hierarchy for the optimizer runtime.
All exceptions raised by the optimizer inherit from OptimizerError.

Error classes:
- Configuration errors: static routing/pricing tables are inconsistent (fail fast)
- Validation errors: a caller passed an unusable argument
- Cache, compression and audit failures are best-effort: logged and absorbed,
  never raised to callers

Errors raised by a caller-supplied generation function are never wrapped
and reach the caller unchanged.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for host applications.

    Used by HTTP handlers that turn exceptions into generic error payloads.
    """

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNKNOWN_MODEL = "UNKNOWN_MODEL"
    EMPTY_TIER = "EMPTY_TIER"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class OptimizerError(Exception):
    """Base exception for all optimizer errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(OptimizerError):
    """Raised when configuration is invalid or inconsistent."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class UnknownModelError(ConfigurationError):
    """Raised when a model is missing from the pricing or latency tables."""

    def __init__(self, model: str, table: str = "pricing", details: dict[str, Any] | None = None):
        message = f"Unknown model: {model} (not present in {table} table)"
        error_details = details or {}
        error_details.update({"model": model, "table": table})
        super().__init__(message, error_details)
        self.model = model
        self.table = table


class EmptyTierError(ConfigurationError):
    """Raised when a complexity tier has no candidate models."""

    def __init__(self, tier: str, details: dict[str, Any] | None = None):
        message = f"No models available for tier {tier}"
        error_details = details or {}
        error_details.update({"tier": tier})
        super().__init__(message, error_details)
        self.tier = tier


class ValidationError(OptimizerError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=400)


def make_error_response(
    error_code: ErrorCode,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        error_code: Standard error code
        message: Human-readable error message
        context: Additional context/details

    Returns:
        Standardized error response dictionary

    Example:
        >>> make_error_response(ErrorCode.INVALID_INPUT, "Prompt is required")
        {'success': False, 'error_code': 'INVALID_INPUT', 'message': 'Prompt is required', 'details': {}}
    """
    return {
        "success": False,
        "error_code": error_code.value,
        "message": message,
        "details": context or {},
    }


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, UnknownModelError):
        return ErrorCode.UNKNOWN_MODEL

    if isinstance(error, EmptyTierError):
        return ErrorCode.EMPTY_TIER

    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR

    if isinstance(error, ValidationError):
        return ErrorCode.INVALID_INPUT

    return ErrorCode.INTERNAL_ERROR
