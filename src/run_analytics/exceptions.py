"""
Custom exceptions for run analytics.

The metric functions themselves never raise on sparse or missing data; they
return None, 0 or an empty sequence instead. These exceptions exist for the
edges of the package: turning raw provider records into activities, and
validating configuration and command-line input.

Each exception includes:
- A descriptive message
- An error code
- Optional details for debugging
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    ACTIVITY_DATA_ERROR = "ACTIVITY_DATA_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class RunAnalyticsError(Exception):
    """
    Base exception for all run analytics errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for error output."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class ActivityDataError(RunAnalyticsError):
    """Raised when a raw activity record cannot be turned into an Activity."""

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if index is not None:
            error_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCode.ACTIVITY_DATA_ERROR,
            details=error_details,
        )


class ConfigurationError(RunAnalyticsError):
    """Raised when settings or command-line options are invalid."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.CONFIGURATION_ERROR,
            details=error_details,
        )
