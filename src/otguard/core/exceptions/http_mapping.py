"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import OTGuardError
from .domain import (
    ConfigurationError,
    AuthorizationError,
    PermissionDeniedError,
    CollaboratorTimeoutError,
    ValidationError,
    ValidationFailedError,
    UpstreamError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 403 Forbidden
    AuthorizationError: 403,
    PermissionDeniedError: 403,
    CollaboratorTimeoutError: 403,

    # 422 Unprocessable Entity
    ValidationError: 422,
    ValidationFailedError: 422,

    # 500 Internal Server Error
    ConfigurationError: 500,

    # 502 Bad Gateway
    UpstreamError: 502,

    # Default for OTGuardError
    OTGuardError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Resolve the status code for an exception by walking its MRO.

    Unknown exceptions map to 500.
    """
    for exc_type in type(exception).__mro__:
        if exc_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exc_type]
    return 500
