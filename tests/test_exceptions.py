"""Tests for exceptions.py - exception hierarchy and serialization."""

from transcript_search.core.exceptions import (
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


class TestTranscriptSearchError:
    def test_basic_creation(self):
        e = TranscriptSearchError("test error")
        assert str(e) == "test error"
        assert e.severity == ErrorSeverity.ERROR
        assert e.category == ErrorCategory.COLLABORATOR
        assert e.retryable is False

    def test_to_dict_minimal(self):
        assert TranscriptSearchError("boom").to_dict() == {
            "error": "boom",
            "category": "collaborator",
            "severity": "error",
            "retryable": False,
        }

    def test_to_dict_with_context(self):
        ctx = ErrorContext(operation="suggest", collaborator="trending", suggestion="retry", retry_after=5.0)
        d = TranscriptSearchError("fail", context=ctx).to_dict()
        assert d["operation"] == "suggest"
        assert d["collaborator"] == "trending"
        assert d["suggestion"] == "retry"
        assert d["retry_after_seconds"] == 5.0


class TestCollaboratorErrors:
    def test_collaborator_error_is_retryable(self):
        e = CollaboratorError("storage write failed")
        assert isinstance(e, TranscriptSearchError)
        assert e.retryable is True

    def test_unavailable(self):
        e = CollaboratorUnavailableError("embeddings", "circuit open")
        assert str(e) == "embeddings: circuit open"
        assert e.severity == ErrorSeverity.TRANSIENT
        assert e.context.collaborator == "embeddings"

    def test_unavailable_keeps_context(self):
        ctx = ErrorContext(operation="embed")
        e = CollaboratorUnavailableError("embeddings", context=ctx)
        assert str(e) == "embeddings: temporarily unavailable"
        assert e.context.operation == "embed"

    def test_rate_limit(self):
        e = RateLimitError(retry_after=2.5)
        assert str(e) == "Rate limit exceeded"
        assert e.context.retry_after == 2.5
        assert e.to_dict()["suggestion"] == "Wait and retry the request"
        assert isinstance(e, CollaboratorError)

    def test_network(self):
        e = NetworkError()
        assert str(e) == "Network connection failed"
        assert e.retryable is True


class TestValidationErrors:
    def test_validation_is_warning(self):
        e = ValidationError("bad")
        assert e.severity == ErrorSeverity.WARNING
        assert e.category == ErrorCategory.VALIDATION
        assert e.retryable is False

    def test_invalid_query(self):
        e = InvalidQueryError("   ")
        assert str(e) == "Invalid query: Query cannot be empty"
        assert e.context.input_value == "   "
        assert e.context.suggestion == "Provide a non-empty search query"

    def test_invalid_parameter(self):
        e = InvalidParameterError("page", 0, "an integer >= 1")
        assert str(e) == "Invalid parameter 'page': 0 (expected an integer >= 1)"
        assert e.context.suggestion == "Expected an integer >= 1"


class TestDataAndConfigErrors:
    def test_malformed_result(self):
        assert str(MalformedResultError("no id")) == "Malformed result: no id"
        e = MalformedResultError("no id", source="backend")
        assert str(e) == "Malformed result (backend): no id"
        assert isinstance(e, DataError)
        assert e.category == ErrorCategory.DATA

    def test_configuration(self):
        e = ConfigurationError("max_suggestions must be positive", setting="max_suggestions")
        assert e.setting == "max_suggestions"
        assert e.severity == ErrorSeverity.CRITICAL
        assert e.to_dict()["category"] == "config"
