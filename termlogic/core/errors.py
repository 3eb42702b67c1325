"""Error Hierarchy — typed, categorized exceptions for all termlogic failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Only lookup/infrastructure errors are retryable; data errors are not
    - to_response() produces the REST envelope
    - No error is ever downgraded to a default value by the layer that raises it

Design Decisions:
    - Single hierarchy with TermLogicError base: the FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - HandleNotAssignedError subclasses LookupUnavailableError: callers that only
      care about "no handle yet" catch the parent, provisioning code catches the child
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID


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
    EXTERNAL_SERVICE = "external_service"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    node_kind: str | None = None
    stable_id: UUID | None = None
    node_path: str | None = None
    debug_info: dict[str, Any] | None = None


class TermLogicError(Exception):
    """Base exception for all termlogic errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.retryable = retryable

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "node_kind": self.context.node_kind,
                    "stable_id": (
                        str(self.context.stable_id)
                        if self.context.stable_id else None
                    ),
                    "node_path": self.context.node_path,
                },
            }
        }


# ─── Identity Errors ────────────────────────────────────────────

class LookupUnavailableError(TermLogicError):
    """Identifier-lookup service unreachable. Safe to retry."""
    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        code: str = "LOOKUP_UNAVAILABLE",
        category: ErrorCategory = ErrorCategory.EXTERNAL_SERVICE,
        http_status: int = 503,
    ):
        super().__init__(
            message, code, category,
            ErrorSeverity.WARNING, context, http_status, retryable=True,
        )


class HandleNotAssignedError(LookupUnavailableError):
    """Lookup service reachable but holds no handle for the identifier."""
    def __init__(self, stable_id: UUID, context: ErrorContext | None = None):
        context = context or ErrorContext()
        context.stable_id = stable_id
        super().__init__(
            f"No handle assigned for identifier {stable_id}",
            context,
            code="HANDLE_NOT_ASSIGNED",
            category=ErrorCategory.RESOURCE_NOT_FOUND,
            http_status=404,
        )
        self.stable_id = stable_id


# ─── Classification Errors ──────────────────────────────────────

class InvalidPartitionError(TermLogicError):
    """Equivalence sets overlap. Indicates a classifier bug upstream."""
    def __init__(
        self, shared_concepts: frozenset[int], context: ErrorContext | None = None,
    ):
        shown = ", ".join(str(c) for c in sorted(shared_concepts))
        super().__init__(
            f"Equivalent sets are not disjoint; shared concepts: {shown}",
            "INVALID_PARTITION", ErrorCategory.VALIDATION,
            ErrorSeverity.CRITICAL, context, 422,
        )
        self.shared_concepts = shared_concepts


# ─── Serialization Errors ───────────────────────────────────────

class MalformedDocumentError(TermLogicError):
    """Input text rejected: doctype, broken markup, or ill-typed values."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "MALFORMED_DOCUMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidExpressionError(TermLogicError):
    """Expression tree violates a structural rule; raised before any output."""
    def __init__(
        self, message: str, node_path: str, context: ErrorContext | None = None,
    ):
        context = context or ErrorContext()
        context.node_path = node_path
        super().__init__(
            f"{message} (at {node_path})",
            "INVALID_EXPRESSION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.node_path = node_path


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(TermLogicError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503, retryable=True,
        )
