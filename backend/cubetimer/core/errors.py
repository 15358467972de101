"""Error Hierarchy — typed, categorized exceptions for all Cube Timer failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller mistakes; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by the global handlers
    - The timing state machine and statistics engine never raise these for bad input:
      out-of-order key edges are ignored, undefined stats are StatStatus.UNDEFINED

Design Decisions:
    - Single hierarchy with CubeTimerError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
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
    CONFIGURATION = "configuration"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str | None = None
    solve_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class CubeTimerError(Exception):
    """Base exception for all Cube Timer errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "event_id": self.context.event_id,
                    "solve_id": self.context.solve_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class EventConfigurationError(CubeTimerError):
    """Event definition cannot produce scrambles that satisfy the move constraints."""
    def __init__(self, event_id: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.event_id = event_id
        super().__init__(
            f"Event '{event_id}' is misconfigured: {reason}",
            "EVENT_MISCONFIGURED", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.event_id = event_id
        self.reason = reason


class DuplicateEventError(CubeTimerError):
    """An event with the same id is already registered."""
    def __init__(self, event_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.event_id = event_id
        super().__init__(
            f"Event '{event_id}' is already registered",
            "EVENT_ALREADY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.event_id = event_id


class EventNotRemovableError(CubeTimerError):
    """Only custom events can be removed from the catalog."""
    def __init__(self, event_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.event_id = event_id
        super().__init__(
            f"Event '{event_id}' is a standard event and cannot be removed",
            "EVENT_NOT_REMOVABLE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )


class UnknownEventError(CubeTimerError):
    """Event id is not in the catalog."""
    def __init__(self, event_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.event_id = event_id
        super().__init__(
            f"Event '{event_id}' not found",
            "UNKNOWN_EVENT", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.event_id = event_id


class InvalidSolveError(CubeTimerError):
    """Solve record violates the Solve invariants (negative time, wrong event, reused scramble)."""
    def __init__(self, message: str, solve_id: str | None = None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.solve_id = solve_id
        super().__init__(
            message, "INVALID_SOLVE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )


class ScrambleReusedError(CubeTimerError):
    """A scramble already issued to a Solve was offered to the timer again."""
    def __init__(self, scramble_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Scramble {scramble_id} was already used for a solve",
            "SCRAMBLE_REUSED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.scramble_id = scramble_id


class ResourceNotFoundError(CubeTimerError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(CubeTimerError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
