"""Error classification utilities for user-facing failures."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ValidationError


class ErrorCategory(Enum):
    """Categories of errors that can reach a consumer."""

    STORAGE_UNAVAILABLE = "storage_unavailable"
    INVALID_DATE = "invalid_date"
    UNKNOWN_TIER = "unknown_tier"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Storage errors
    ERR_STORAGE_UNAVAILABLE = "ERR_STORAGE_UNAVAILABLE"

    # Input errors
    ERR_INVALID_DATE = "ERR_INVALID_DATE"
    ERR_UNKNOWN_TIER = "ERR_UNKNOWN_TIER"
    ERR_INVALID_INPUT = "ERR_INVALID_INPUT"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


PatternType = Literal["storage", "date", "tier"]

_ERROR_PATTERNS: dict[PatternType, dict[str, list[str] | set[str]]] = {
    "storage": {
        "phrases": [
            "connection",
            "timeout",
            "unable to open database",
            "database is locked",
            "storage",
        ],
        "exception_types": {"StorageError", "ConnectionError", "TimeoutError", "OperationalError"},
    },
    "date": {
        "phrases": [
            "invalid isoformat",
            "month must be",
            "day is out of range",
        ],
        "exception_types": set(),
    },
    "tier": {
        "phrases": [
            "is not a valid costtier",
            "unknown tier",
        ],
        "exception_types": set(),
    },
}


def _match_error_pattern(*, error_str: str, exception_type: str, pattern_type: PatternType) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def _describe_input_error(exception: Exception) -> str:
    """One-line description of a bad argument, naming the field for model validation errors."""
    if isinstance(exception, ValidationError) and exception.errors():
        first = exception.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        return f"{field}: {first['msg']}" if field else first["msg"]
    return str(exception)


def classify_error(exception: Exception) -> ErrorCategory:
    """Classify an exception into an ErrorCategory."""
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    # Model validation failures are always bad arguments; stored snapshots are validated on load
    if isinstance(exception, ValidationError):
        return ErrorCategory.INVALID_INPUT
    # Date and tier checks run before storage: their messages can mention "storage"
    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="date"):
        return ErrorCategory.INVALID_DATE
    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="tier"):
        return ErrorCategory.UNKNOWN_TIER
    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="storage"):
        return ErrorCategory.STORAGE_UNAVAILABLE
    if isinstance(exception, ValueError):
        return ErrorCategory.INVALID_INPUT
    return ErrorCategory.UNKNOWN


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    category = classify_error(exception)

    if category == ErrorCategory.INVALID_DATE:
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_DATE,
            message="That date could not be understood.",
            suggestion="Use the YYYY-MM-DD format, e.g. 2025-01-31.",
            severity=ErrorSeverity.LOW,
        )

    if category == ErrorCategory.UNKNOWN_TIER:
        return ErrorResponse(
            code=ErrorCode.ERR_UNKNOWN_TIER,
            message="Unknown cost tier.",
            suggestion="Choose one of: premium, budget, ultra_budget.",
            severity=ErrorSeverity.LOW,
        )

    if category == ErrorCategory.STORAGE_UNAVAILABLE:
        return ErrorResponse(
            code=ErrorCode.ERR_STORAGE_UNAVAILABLE,
            message="Progress storage is unavailable.",
            suggestion="Check STORAGE_BACKEND, SQLITE_DB_PATH or REDIS_URL and try again.",
            severity=ErrorSeverity.CRITICAL,
        )

    if category == ErrorCategory.INVALID_INPUT:
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_INPUT,
            message=f"Invalid input: {_describe_input_error(exception)}",
            suggestion="Run `habitforge --help` to see the accepted arguments.",
            severity=ErrorSeverity.LOW,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again. If the problem persists, re-run with LOGFIRE_TOKEN set and inspect the trace.",
        severity=ErrorSeverity.MEDIUM,
    )
