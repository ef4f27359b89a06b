"""Exceptions module for otguard.

This module provides the complete exception hierarchy for otguard.
"""

from .base import (
    OTGuardError,
    get_http_status_code,
    create_error_response,
)

from .domain import (
    # Configuration Errors
    ConfigurationError,
    MissingSchemaError,
    InvalidSchemaError,

    # Authorization Errors
    AuthorizationError,
    PermissionDeniedError,
    CollaboratorTimeoutError,

    # Validation Errors
    ValidationError,
    ValidationFailedError,

    # Upstream Errors
    UpstreamError,
)

from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    "OTGuardError",
    "get_http_status_code",
    "create_error_response",
    "HTTP_STATUS_MAP",
    "ConfigurationError",
    "MissingSchemaError",
    "InvalidSchemaError",
    "AuthorizationError",
    "PermissionDeniedError",
    "CollaboratorTimeoutError",
    "ValidationError",
    "ValidationFailedError",
    "UpstreamError",
]
