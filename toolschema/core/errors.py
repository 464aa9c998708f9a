"""Error Hierarchy: typed, categorized exceptions for tool registration failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - The schema compiler raises none of these; it records a SchemaDegradation instead
    - to_response() produces the structured error envelope

Design Decisions:
    - Single hierarchy with ToolSchemaError base: callers catch one type (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Degradations are an Enum, not exceptions: they are recovered where they happen
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


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
    INTERNAL = "internal"


class SchemaDegradation(str, Enum):
    """Shapes the compiler recovers from locally (logged at DEBUG, never raised)."""
    UNSUPPORTED_SHAPE = "unsupported_shape"
    DEFAULT_FACTORY_FAILURE = "default_factory_failure"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tool_name: str | None = None
    permission: str | None = None
    debug_info: dict[str, Any] | None = None


class ToolSchemaError(Exception):
    """Base exception for all toolschema errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "tool_name": self.context.tool_name,
                    "permission": self.context.permission,
                },
            }
        }


# ─── Registration Errors ────────────────────────────────────────

class ToolValidationError(ToolSchemaError):
    """Tool definition failed registry validation (name or permissions)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class DuplicateToolError(ToolSchemaError):
    """A tool with the same name is already registered (or repeated in one batch)."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.tool_name = name
        super().__init__(
            f"Tool '{name}' is already registered",
            "DUPLICATE_TOOL", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx,
        )
        self.name = name


class ResourceNotFoundError(ToolSchemaError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
