"""Error Hierarchy — typed, categorized exceptions for asset query failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No SQL text or driver details leak into user-facing messages
    - ErrorContext.organization_id is filled in by the service layer on the way out

Design Decisions:
    - Single hierarchy with AssetQueryError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
    - Unknown filter fields and sort keys are NOT errors (logged and ignored by
      the compilers); only malformed values for known fields raise
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    organization_id: str | None = None
    filter_name: str | None = None


class AssetQueryError(Exception):
    """Base exception for all asset query errors."""

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
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "organization_id": self.context.organization_id,
                    "filter_name": self.context.filter_name,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidFilterError(AssetQueryError):
    """A known filter field carried a value that cannot be compiled."""
    def __init__(self, message: str, filter_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.filter_name = filter_name
        super().__init__(
            message, "INVALID_FILTER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.filter_name = filter_name


class InvalidPaginationError(AssetQueryError):
    """Page or page size outside the accepted range."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_PAGINATION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(AssetQueryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
