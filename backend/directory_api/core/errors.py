"""Error Hierarchy — typed, categorized exceptions for every query-engine failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation errors (400) carry field-level details; store errors (503/500) never do
    - to_response() produces the REST envelope: {"error": message, "code": ..., ...}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with DirectoryError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: the timestamp is fixed when the error is raised,
      not when the handler renders it (request correlation lives in the log extras)
    - "error" is the human message at top level (clients render it directly);
      "details" sits beside it, never nested
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    STORE_UNAVAILABLE = "store_unavailable"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """When the error was raised."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class FieldError:
    """One offending request parameter."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class DirectoryError(Exception):
    """Base exception for all directory query errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class QueryValidationError(DirectoryError):
    """One or more request parameters are invalid. Raised before any store call."""
    def __init__(
        self, details: list[FieldError], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Invalid request parameters",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.details = details

    @property
    def fields(self) -> list[str]:
        return [d.field for d in self.details]

    def to_response(self) -> dict:
        response = super().to_response()
        response["details"] = [d.to_dict() for d in self.details]
        return response


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreUnavailableError(DirectoryError):
    """Record store not configured, unreachable, or timed out."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            "Service unavailable",
            "STORE_UNAVAILABLE", ErrorCategory.STORE_UNAVAILABLE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class InternalQueryError(DirectoryError):
    """Unexpected failure while building or running a query.

    ``reason`` is logged server-side and only surfaced to clients in
    development (see api/error_handlers.py).
    """
    def __init__(
        self, reason: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Internal server error",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.reason = reason
        self.operation = operation
