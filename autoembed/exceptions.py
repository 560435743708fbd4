"""Application exception hierarchy.

All custom exceptions inherit from AutoEmbedError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "AEM-1000"
    CONFIGURATION_ERROR = "AEM-1001"

    # Document errors (2xxx)
    DOCUMENT_INVALID = "AEM-2000"
    BULK_WRITE_FAILED = "AEM-2001"

    # Vector store errors (4xxx)
    VECTOR_STORE_ERROR = "AEM-4000"
    CONNECTION_FAILED = "AEM-4001"
    COLLECTION_ERROR = "AEM-4002"

    # Search index errors (5xxx)
    INDEX_ERROR = "AEM-5000"
    INDEX_CREATE_FAILED = "AEM-5001"
    INDEX_BUILD_FAILED = "AEM-5002"

    # Search errors (6xxx)
    SEARCH_ERROR = "AEM-6000"


class AutoEmbedError(Exception):
    """Base exception for all autoembed errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured logs."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(AutoEmbedError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class DocumentError(AutoEmbedError):
    """Document write error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DOCUMENT_INVALID,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(AutoEmbedError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class SearchIndexError(VectorStoreError):
    """Search index management error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INDEX_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class SearchError(VectorStoreError):
    """Vector search query error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SEARCH_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
