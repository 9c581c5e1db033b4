"""
Unified Exception Hierarchy for Deep Search.

Exception Hierarchy:
    DeepSearchError (base)
    ├── SourceError
    │   ├── SourceUnavailableError
    │   ├── SourceEmptyError
    │   └── ParseError
    ├── InvalidQueryError
    ├── CompositionError
    └── ConfigurationError

Source errors never leave a client: each client absorbs them and degrades to
an absent summary or an empty sequence. Only InvalidQueryError and
CompositionError reach callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    WARNING = auto()  # Degraded, pipeline continues
    ERROR = auto()  # Operation failed
    CRITICAL = auto()  # Cannot continue


class ErrorCategory(Enum):
    """Categories for error classification."""

    SOURCE = "source"
    VALIDATION = "validation"
    DATA = "data"
    COMPOSITION = "composition"
    CONFIGURATION = "config"


@dataclass(frozen=True)
class ErrorContext:
    """Rich context for error messages."""

    operation: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class DeepSearchError(Exception):
    """
    Base exception for all Deep Search errors.

    Provides:
    - Structured error context
    - Severity classification
    - JSON-friendly formatting
    """

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.SOURCE,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
        }
        if self.context.operation:
            result["operation"] = self.context.operation
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        return result


# =============================================================================
# Source Errors (absorbed inside each client)
# =============================================================================


class SourceError(DeepSearchError):
    """Base class for failures talking to one upstream source."""

    def __init__(
        self,
        message: str,
        *,
        source: str,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            f"{source}: {message}",
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.SOURCE,
        )
        self.source = source


class SourceUnavailableError(SourceError):
    """Raised for network, transport or HTTP-status failures."""

    def __init__(
        self,
        message: str = "Service unreachable",
        *,
        source: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, source=source, context=context)
        self.status_code = status_code


class SourceEmptyError(SourceError):
    """Raised when a source answers well-formed with no usable result."""

    def __init__(
        self,
        message: str = "No result",
        *,
        source: str,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, source=source, context=context)


class ParseError(SourceError):
    """Raised when a response body has an unexpected shape."""

    def __init__(
        self,
        message: str,
        *,
        source: str,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(f"Parse error: {message}", source=source, context=context)
        self.category = ErrorCategory.DATA


# =============================================================================
# Caller-facing Errors
# =============================================================================


class InvalidQueryError(DeepSearchError):
    """Raised when a search query is empty after trimming."""

    def __init__(
        self,
        query: str | None,
        reason: str = "Query cannot be empty",
    ) -> None:
        super().__init__(
            f"Invalid query: {reason}",
            context=ErrorContext(
                operation="deep_search",
                input_value=query,
                suggestion="Provide a topic, e.g. 'diffusion models'",
            ),
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
        )


class CompositionError(DeepSearchError):
    """Raised when the PDF writer cannot produce a document."""

    def __init__(
        self,
        message: str = "Failed to generate PDF",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context or ErrorContext(operation="compose_pdf"),
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.COMPOSITION,
        )


class ConfigurationError(DeepSearchError):
    """Raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
        )
