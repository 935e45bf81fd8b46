"""
Error Definitions

Defines the exception classes raised by the chat adapter for unified error handling.
Cancellation is not an error and has no class here.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Adapter Base Exception

    Base class for all custom exceptions, containing error message, type, and code.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "app_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Human-readable error message
            error_type: Error type
            code: Error code
            details: Extra error details
            status_code: HTTP status code associated with the failure
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class ConfigError(AppError):
    """
    Configuration Error

    Raised before any I/O when the base URL or the API key is missing.
    """

    def __init__(
        self,
        message: str = "API configuration is incomplete",
        code: str = "api_config_incomplete",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="config_error",
            code=code,
            details=details,
            status_code=400,
        )


class TransportError(AppError):
    """
    Upstream Transport Error

    Raised when the upstream returns a non-success status, the connection fails,
    or the response body cannot be read as a stream.
    """

    def __init__(
        self,
        message: str = "Upstream service error",
        code: str = "upstream_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 502,
    ):
        super().__init__(
            message=message,
            error_type="transport_error",
            code=code,
            details=details,
            status_code=status_code,
        )


class RecordParseError(AppError):
    """
    SSE Record Parse Error

    Raised for a single malformed data line. The stream decoder logs it and moves on.
    """

    def __init__(
        self,
        message: str = "Malformed stream record",
        code: str = "record_parse_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="record_parse_error",
            code=code,
            details=details,
            status_code=502,
        )


MISFILED_THINK_CODE = "CEREBR_MISFILED_THINK_SILENTLY"


class MisfiledThinkError(AppError):
    """
    Misfiled Reasoning Abort

    Raised when reasoning text shows up in the visible content channel before
    anything was dispatched. Always propagates to the caller.
    """

    def __init__(
        self,
        message: str = "Detected misfiled reasoning content in content field",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="guard_abort",
            code=MISFILED_THINK_CODE,
            details=details,
            status_code=502,
        )
