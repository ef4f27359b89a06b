"""Base exceptions for otguard.

This module defines the base exception hierarchy for the otguard library.
All exceptions inherit from OTGuardError and include error codes, details,
and HTTP status code mappings for host responses.
"""

from typing import Any, Dict, Optional


class OTGuardError(Exception):
    """Base exception for all otguard errors.

    All exceptions in the otguard library inherit from this base class
    and include structured error information for logging and host responses.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as lookup_status_code
    return lookup_status_code(exception)


def create_error_response(exception: OTGuardError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The otguard exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
            "status": get_http_status_code(exception),
        }
    }
