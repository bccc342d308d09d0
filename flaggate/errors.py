"""
Custom exceptions and error codes for FlagGate.

This module provides:
- Structured error codes for categorized error handling
- Custom exception classes for specific failure scenarios
- Error response schema for consistent API responses

Data-level misses are deliberately not represented here as failures of the
core: an unknown flag name or an unparseable rule resolves to a default value
inside the registry. These exceptions surface at the edges (HTTP, CLI, loaders).
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """
    Application-wide error codes for categorized error handling.

    Format: CATEGORY_SPECIFIC_ERROR
    Categories:
    - FEATURE_*: Flag definition errors
    - CACHE_*: Persisted definition loading errors
    - RULE_*: Condition rule errors
    """

    # Feature-related errors
    FEATURE_NOT_FOUND = "FEATURE_NOT_FOUND"
    FEATURE_INVALID_DATA = "FEATURE_INVALID_DATA"

    # Cache-related errors
    CACHE_LOAD_FAILED = "CACHE_LOAD_FAILED"

    # Rule-related errors
    RULE_PARSE_FAILED = "RULE_PARSE_FAILED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Structured error response for API errors."""

    error_code: ErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(use_enum_values=True)


class FlagGateError(Exception):
    """
    Base exception for all FlagGate errors.

    Provides structured error information for consistent error handling.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse for API output."""
        return ErrorResponse(
            error_code=self.error_code,
            message=self.message,
            details=self.details if self.details else None,
        )


class FeatureNotFoundError(FlagGateError):
    """Raised by the outer surfaces when a flag name is not registered."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Feature '{name}' not found",
            error_code=ErrorCode.FEATURE_NOT_FOUND,
            details={"name": name},
            status_code=404,
        )


class InvalidFeatureError(FlagGateError):
    """Raised when a submitted definition cannot be accepted."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            message=f"Invalid definition for feature '{name}': {reason}",
            error_code=ErrorCode.FEATURE_INVALID_DATA,
            details={"name": name, "reason": reason},
            status_code=422,
        )


class CacheLoadError(FlagGateError):
    """Raised when persisted definitions cannot be loaded."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Failed to load cached features from {path}: {reason}",
            error_code=ErrorCode.CACHE_LOAD_FAILED,
            details={"path": path, "reason": reason},
            status_code=500,
        )


class RuleParseError(FlagGateError):
    """Raised by rule parsers; evaluators turn it into a failed match."""

    def __init__(self, rule: str, reason: str):
        super().__init__(
            message=f"Cannot parse rule '{rule}': {reason}",
            error_code=ErrorCode.RULE_PARSE_FAILED,
            details={"rule": rule, "reason": reason},
            status_code=422,
        )
