"""Custom exception classes for the interview evaluation core."""

from enum import Enum
from typing import Any, Dict, Optional


class InterviewEvalException(Exception):
    """Base exception for all interview evaluation errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "status_code": self.status_code,
                "details": self.details,
            }
        }


class ValidationError(InterviewEvalException):
    """Exception raised for invalid caller input. Never retried."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None,
        code: str = "VALIDATION_ERROR",
    ):
        error_details = details or {}
        if errors:
            error_details["validation_errors"] = errors
        super().__init__(
            message=message,
            status_code=422,
            code=code,
            details=error_details,
        )


class EmptyInputError(ValidationError):
    """Exception raised when text input is empty after trimming."""

    def __init__(
        self,
        message: str = "Input text is empty",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details, code="EMPTY_INPUT")


class DimensionMismatchError(ValidationError):
    """Exception raised when two vectors of different length are compared."""

    def __init__(self, left: int, right: int):
        super().__init__(
            message=f"Vector dimensions differ: {left} != {right}",
            details={"left_dimension": left, "right_dimension": right},
            code="DIMENSION_MISMATCH",
        )


class ProviderError(InterviewEvalException):
    """Base exception for embedding/completion provider failures."""

    def __init__(
        self,
        message: str = "Model provider call failed",
        status_code: int = 502,
        code: str = "PROVIDER_ERROR",
        provider_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if provider_status is not None:
            error_details["provider_status"] = provider_status
        self.provider_status = provider_status
        super().__init__(
            message=message,
            status_code=status_code,
            code=code,
            details=error_details,
        )


class TransientProviderError(ProviderError):
    """Rate-limit or overload signal from a provider. Safe to retry."""

    def __init__(
        self,
        message: str = "Model provider is temporarily unavailable",
        provider_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=503,
            code="PROVIDER_TRANSIENT_ERROR",
            provider_status=provider_status,
            details=details,
        )


class PermanentProviderError(ProviderError):
    """Bad request, missing model, auth or quota failure. Never retried."""

    def __init__(
        self,
        message: str = "Model provider rejected the request",
        provider_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=502,
            code="PROVIDER_PERMANENT_ERROR",
            provider_status=provider_status,
            details=details,
        )


class EmbeddingError(InterviewEvalException):
    """Exception raised for embedding generation errors."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        model: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if model:
            error_details["model"] = model
        super().__init__(
            message=message,
            status_code=502,
            code="EMBEDDING_ERROR",
            details=error_details,
        )


class GenerationFailureReason(str, Enum):
    """Why question generation failed."""

    OVERLOADED = "overloaded"
    RATE_LIMITED = "rate_limited"
    MODEL_UNAVAILABLE = "model_unavailable"
    INVALID_REQUEST = "invalid_request"
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_CONFIG = "invalid_config"
    EMPTY_RESPONSE = "empty_response"
    UNKNOWN = "unknown"


_RETRYABLE_REASONS = {
    GenerationFailureReason.OVERLOADED,
    GenerationFailureReason.RATE_LIMITED,
}

GENERATION_FAILURE_MESSAGES: Dict[GenerationFailureReason, str] = {
    GenerationFailureReason.OVERLOADED: (
        "AI service is temporarily overloaded. Please try again in 30-60 seconds."
    ),
    GenerationFailureReason.RATE_LIMITED: (
        "Rate limit reached. Please wait a minute and try again."
    ),
    GenerationFailureReason.MODEL_UNAVAILABLE: (
        "AI model not available. Please check your API configuration."
    ),
    GenerationFailureReason.INVALID_REQUEST: (
        "Invalid request to AI service. Please try with a different job description."
    ),
    GenerationFailureReason.QUOTA_EXCEEDED: (
        "API quota exceeded. Please check your model provider usage limits."
    ),
    GenerationFailureReason.INVALID_CONFIG: (
        "AI service is not configured correctly. Please check the API key and model settings."
    ),
    GenerationFailureReason.EMPTY_RESPONSE: (
        "AI service returned no questions. Please try again."
    ),
    GenerationFailureReason.UNKNOWN: "Unable to generate questions. Please try again.",
}


class GenerationError(InterviewEvalException):
    """Exception raised when question generation fails."""

    def __init__(
        self,
        reason: GenerationFailureReason = GenerationFailureReason.UNKNOWN,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.reason = reason
        error_details = details or {}
        error_details["reason"] = reason.value
        super().__init__(
            message=message or GENERATION_FAILURE_MESSAGES[reason],
            status_code=503 if reason in _RETRYABLE_REASONS else 502,
            code="GENERATION_ERROR",
            details=error_details,
        )


class ParseFailure(InterviewEvalException):
    """Exception raised when submitted or generated text has the wrong shape."""

    def __init__(
        self,
        message: str = "Could not parse the submitted text",
        expected_count: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if expected_count is not None:
            error_details["expected_count"] = expected_count
        super().__init__(
            message=message,
            status_code=400,
            code="PARSE_FAILURE",
            details=error_details,
        )


class ExtractionError(InterviewEvalException):
    """Exception raised when no usable text can be extracted from a document."""

    def __init__(
        self,
        message: str = (
            "Could not extract meaningful text from PDF. "
            "Please ensure the PDF contains readable text."
        ),
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=400,
            code="EXTRACTION_ERROR",
            details=details,
        )


class StorageError(InterviewEvalException):
    """Exception raised for object storage errors."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=502,
            code="STORAGE_ERROR",
            details=details,
        )


class NotFoundError(InterviewEvalException):
    """Exception raised when a resource is not found."""

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        if resource_id:
            message += f" with id: {resource_id}"
        error_details = details or {}
        error_details["resource"] = resource
        if resource_id:
            error_details["resource_id"] = resource_id
        super().__init__(
            message=message,
            status_code=404,
            code="NOT_FOUND",
            details=error_details,
        )


class EvaluationUnavailable(InterviewEvalException):
    """
    Raised inside the evaluator when the completion call yields nothing usable.

    The evaluator converts it into neutral-default scores; it does not reach
    callers of ``AnswerEvaluator.evaluate``.
    """

    def __init__(
        self,
        message: str = "Evaluation is temporarily unavailable",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=503,
            code="EVALUATION_UNAVAILABLE",
            details=details,
        )
