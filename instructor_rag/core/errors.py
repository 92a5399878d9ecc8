"""Custom error types and error classification utilities."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Categories of errors for better handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    NOT_FOUND = "not_found"
    MALFORMED_RESPONSE = "malformed_response"
    STREAM = "stream"
    UNKNOWN = "unknown"


class RAGServiceError(Exception):
    """Base exception for chat request failures."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error": self.message,
            "error_type": type(self).__name__,
            "category": self.category.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class ValidationError(RAGServiceError):
    """Malformed or empty inbound payload."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            details=details,
        )


class ProviderError(RAGServiceError):
    """An external service call (embedding, retrieval or completion) failed."""

    def __init__(
        self,
        message: str,
        stage: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        original_error: Optional[str] = None,
    ):
        details: Dict[str, Any] = {"stage": stage}
        if original_error:
            details["original_error"] = original_error

        super().__init__(message=message, category=category, details=details)
        self.stage = stage

    @classmethod
    def from_exception(cls, stage: str, error: Exception) -> "ProviderError":
        """Wrap a provider SDK exception, keeping its classification."""
        return cls(
            message=f"{stage} request failed: {error}",
            stage=stage,
            category=categorize_error(error),
            original_error=f"{type(error).__module__}.{type(error).__name__}",
        )


class StreamError(RAGServiceError):
    """Failure while relaying an already-started completion stream."""

    def __init__(self, message: str, chunks_sent: int = 0):
        super().__init__(
            message=message,
            category=ErrorCategory.STREAM,
            details={"chunks_sent": chunks_sent},
        )
        self.chunks_sent = chunks_sent


# Exception type name -> category. Checked before message keywords.
EXCEPTION_TYPE_CATEGORIES = {
    "AuthenticationError": ErrorCategory.AUTHENTICATION,
    "PermissionDeniedError": ErrorCategory.AUTHENTICATION,
    "UnauthorizedException": ErrorCategory.AUTHENTICATION,
    "ForbiddenException": ErrorCategory.AUTHENTICATION,
    "RateLimitError": ErrorCategory.RATE_LIMIT,
    "APIConnectionError": ErrorCategory.NETWORK,
    "APITimeoutError": ErrorCategory.NETWORK,
    "ConnectError": ErrorCategory.NETWORK,
    "TimeoutException": ErrorCategory.NETWORK,
    "ConnectionError": ErrorCategory.NETWORK,
    "ConnectionResetError": ErrorCategory.NETWORK,
    "ConnectionRefusedError": ErrorCategory.NETWORK,
    "TimeoutError": ErrorCategory.NETWORK,
    "MaxRetryError": ErrorCategory.NETWORK,
    "NotFoundException": ErrorCategory.NOT_FOUND,
    "NotFoundError": ErrorCategory.NOT_FOUND,
    "KeyError": ErrorCategory.MALFORMED_RESPONSE,
    "IndexError": ErrorCategory.MALFORMED_RESPONSE,
    "TypeError": ErrorCategory.MALFORMED_RESPONSE,
}

KEYWORD_PATTERNS = [
    (r"invalid.*api key|incorrect api key|unauthori[sz]ed|authentication", ErrorCategory.AUTHENTICATION),
    (r"rate limit|too many requests|\b429\b|quota", ErrorCategory.RATE_LIMIT),
    (r"connection|timed? ?out|network|refused|unreachable", ErrorCategory.NETWORK),
    (r"not found|\b404\b", ErrorCategory.NOT_FOUND),
]


def categorize_error(error: Exception) -> ErrorCategory:
    """Classify a provider exception.

    Uses a two-stage classification:
    1. Match the exception type (or any of its bases) against known names
    2. Fall back to keyword matching on the error message
    """
    for klass in type(error).__mro__:
        category = EXCEPTION_TYPE_CATEGORIES.get(klass.__name__)
        if category is not None:
            return category

    error_str = str(error).lower()
    for pattern, category in KEYWORD_PATTERNS:
        if re.search(pattern, error_str):
            return category

    return ErrorCategory.UNKNOWN
