"""Tests for application exceptions."""

from screener_rag.exceptions import (
    ConfigurationError,
    ErrorCode,
    MalformedResponseError,
    ScreenerRAGError,
    UpstreamError,
    ValidationError,
)


class TestErrorCode:
    """Tests for error codes."""

    def test_error_code_format(self) -> None:
        """Error codes follow RAG-XXXX format."""
        for code in ErrorCode:
            assert code.value.startswith("RAG-")
            assert len(code.value) == 8

    def test_error_code_uniqueness(self) -> None:
        """All error codes are unique."""
        codes = [code.value for code in ErrorCode]
        assert len(codes) == len(set(codes))


class TestScreenerRAGError:
    """Tests for base exception."""

    def test_basic_exception(self) -> None:
        """Base exception stores message and code."""
        error = ScreenerRAGError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}
        assert str(error) == "Something went wrong"

    def test_to_dict(self) -> None:
        """Exception converts to a structured dict."""
        error = ScreenerRAGError(
            "Something went wrong",
            details={"stage": "embedded"},
        )
        assert error.to_dict() == {
            "code": "RAG-1000",
            "message": "Something went wrong",
            "details": {"stage": "embedded"},
        }


class TestValidationError:
    """Tests for validation exception."""

    def test_default_code(self) -> None:
        """ValidationError has correct code."""
        error = ValidationError("Query is required and must be a string")
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert isinstance(error, ScreenerRAGError)


class TestConfigurationError:
    """Tests for configuration exception."""

    def test_default_code(self) -> None:
        """ConfigurationError has correct default code."""
        error = ConfigurationError("PINECONE_INDEX_NAME is not configured")
        assert error.code == ErrorCode.CONFIGURATION_ERROR

    def test_dimension_mismatch_code(self) -> None:
        """ConfigurationError can carry the dimension mismatch code."""
        error = ConfigurationError(
            "bad dims",
            code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
        )
        assert error.code == ErrorCode.EMBEDDING_DIMENSION_MISMATCH


class TestUpstreamError:
    """Tests for upstream exception."""

    def test_carries_service_and_status(self) -> None:
        """Status and service are exposed and copied into details."""
        error = UpstreamError(
            "Pinecone search failed: 503 - unavailable",
            service="pinecone",
            status_code=503,
            code=ErrorCode.VECTOR_INDEX_ERROR,
        )
        assert error.service == "pinecone"
        assert error.status_code == 503
        assert error.details == {"service": "pinecone", "status_code": 503}
        assert error.code == ErrorCode.VECTOR_INDEX_ERROR

    def test_transport_failure_has_no_status(self) -> None:
        """Transport failures carry no status code."""
        error = UpstreamError("connection refused", service="openai")
        assert error.status_code is None
        assert error.code == ErrorCode.INTERNAL_ERROR

    def test_extra_details_merged(self) -> None:
        """Caller details are merged with service info."""
        error = UpstreamError("x", service="gateway", details={"stage": "assembled"})
        assert error.details["stage"] == "assembled"
        assert error.details["service"] == "gateway"


class TestMalformedResponseError:
    """Tests for malformed response exception."""

    def test_default_code(self) -> None:
        """MalformedResponseError has correct code and service."""
        error = MalformedResponseError("no vector", service="openai")
        assert error.code == ErrorCode.MALFORMED_RESPONSE
        assert error.details == {"service": "openai"}
