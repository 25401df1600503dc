"""
Core module for Transcript Search.

Provides:
- Unified exception hierarchy
- Async utilities for collaborator calls
"""

from .async_utils import CircuitBreaker, gather_with_errors
from .exceptions import (
    CollaboratorError,
    CollaboratorUnavailableError,
    ConfigurationError,
    DataError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidParameterError,
    InvalidQueryError,
    MalformedResultError,
    NetworkError,
    RateLimitError,
    TranscriptSearchError,
    ValidationError,
)

__all__ = [
    # Exceptions
    "TranscriptSearchError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "CollaboratorError",
    "CollaboratorUnavailableError",
    "RateLimitError",
    "NetworkError",
    "ValidationError",
    "InvalidQueryError",
    "InvalidParameterError",
    "DataError",
    "MalformedResultError",
    "ConfigurationError",
    # Async utilities
    "gather_with_errors",
    "CircuitBreaker",
]
