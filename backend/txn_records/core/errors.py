"""Error Hierarchy: typed, categorized exceptions for every transaction-records failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the same {status, result} envelope as successful responses
    - No internal details leaked in user-facing messages (500-level errors use a fixed message)

Design Decisions:
    - Single hierarchy with TransactionRecordsError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields stay out of the public message
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


NOT_FOUND_MESSAGE = "Transaction not found with input parameter: "
INTERNAL_ERROR_MESSAGE = "Internal server error"
INVALID_INPUT_MESSAGE = "Invalid input data"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    transaction_id: int | None = None
    reference: str | None = None
    debug_info: dict[str, Any] | None = None


class TransactionRecordsError(Exception):
    """Base exception for all transaction-records errors."""

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

    @property
    def public_message(self) -> str:
        """Message safe to show the caller."""
        if self.http_status >= 500:
            return INTERNAL_ERROR_MESSAGE
        return self.message

    def details(self) -> Any:
        """Structured detail for the envelope `result` (None = omitted)."""
        return None

    def to_response(self) -> dict:
        """Convert to the standard {status, result} envelope."""
        body: dict[str, Any] = {
            "status": {"code": self.http_status, "message": self.public_message},
        }
        details = self.details()
        if details is not None:
            body["result"] = details
        return body


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidRequestError(TransactionRecordsError):
    """Input rejected by a service-level rule (e.g. unknown sort field)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    def details(self) -> list[dict]:
        return [{"field": self.field, "message": self.message, "type": "value_error"}]


class TransactionNotFoundError(TransactionRecordsError):
    """Requested id or reference does not exist."""
    def __init__(self, identifier: int | str, context: ErrorContext | None = None):
        super().__init__(
            f"{NOT_FOUND_MESSAGE}{identifier}",
            "TRANSACTION_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.identifier = identifier


class DuplicateTransactionError(TransactionRecordsError):
    """Create attempted with a reference that is already stored."""
    def __init__(self, reference: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.reference = reference
        super().__init__(
            f"Transaction with reference {reference} already exists",
            "DUPLICATE_TRANSACTION", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.reference = reference


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TransactionRecordsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
