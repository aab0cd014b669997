"""Error Hierarchy — typed, categorized exceptions for all ClosetMap failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope; internal details never reach it
    - Cross-owner access is always ResourceNotFoundError, never a 403

Design Decisions:
    - Single hierarchy with ClosetMapError base: one FastAPI handler renders all of them
    - ErrorContext carries debug_info for logs only, it is not serialized
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
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    owner_id: str | None = None
    debug_info: dict[str, Any] | None = None


class ClosetMapError(Exception):
    """Base exception for all ClosetMap errors."""

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
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(ClosetMapError):
    """Missing or malformed required input."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class UnauthorizedError(ClosetMapError):
    """Caller identity missing or could not be verified."""
    def __init__(self, message: str = "Could not validate credentials",
                 context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(ClosetMapError):
    """Requested resource does not exist for this owner."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(ClosetMapError):
    """A uniqueness constraint rejected the write."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ClosetMapError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ImageStorageError(ClosetMapError):
    """Image storage provider call failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Image {operation} failed: {message}",
            "IMAGE_STORAGE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.operation = operation


class RequestTimeoutError(ClosetMapError):
    """Request exceeded its time budget."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Request exceeded {timeout_seconds:g}s time limit",
            "REQUEST_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504,
        )
