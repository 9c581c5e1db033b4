"""Core error types shared by every layer."""

from .exceptions import (
    CompositionError,
    ConfigurationError,
    DeepSearchError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidQueryError,
    ParseError,
    SourceEmptyError,
    SourceError,
    SourceUnavailableError,
)

__all__ = [
    "CompositionError",
    "ConfigurationError",
    "DeepSearchError",
    "ErrorCategory",
    "ErrorContext",
    "ErrorSeverity",
    "InvalidQueryError",
    "ParseError",
    "SourceEmptyError",
    "SourceError",
    "SourceUnavailableError",
]
