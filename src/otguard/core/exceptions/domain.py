"""Domain-specific exceptions for otguard.

Configuration errors are fatal and only raised while the collection registry
is being built. Authorization and validation errors are expected, per-request
outcomes surfaced to the host pipeline.
"""

from typing import Any, Dict, List, Optional

from .base import OTGuardError


# Configuration Errors
class ConfigurationError(OTGuardError):
    """Raised when there's a configuration issue."""
    pass


class MissingSchemaError(ConfigurationError):
    """Raised when a collection is registered without a schema."""

    def __init__(self, collection: str):
        super().__init__(
            f"Schema for collection {collection} does not exists",
            details={"collection": collection},
        )
        self.collection = collection


class InvalidSchemaError(ConfigurationError):
    """Raised when a collection schema is rejected by the schema engine."""

    def __init__(self, collection: str, summary: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            f"Schema for collection {collection} invalid: {summary}",
            details={"collection": collection, "errors": errors or []},
        )
        self.collection = collection
        self.errors = errors or []


# Authorization Errors
class AuthorizationError(OTGuardError):
    """Base class for authorization errors."""
    pass


class PermissionDeniedError(AuthorizationError):
    """Raised when a gate denies an action.

    The message keeps the ``403: Permission denied (<action>, <reason>)`` prefix
    followed by whichever of collection, document id, role and field are known,
    so the host can tell which rule caused the denial.
    """

    def __init__(
        self,
        action: str,
        collection: Optional[str],
        *,
        reason: Optional[str] = None,
        doc_id: Optional[str] = None,
        role: Optional[str] = None,
        field: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.action = action
        self.collection = collection
        self.reason = reason
        self.doc_id = doc_id
        self.role = role
        self.field = field
        self.detail = detail

        scope = f"{action}, {reason}" if reason else action
        parts = [f"403: Permission denied ({scope}), collection: {collection}"]
        if doc_id is not None:
            parts.append(f"docId: {doc_id}")
        if role is not None:
            parts.append(f"role: {role}")
        if field is not None:
            parts.append(f"field: {field}")
        message = ", ".join(parts)
        if detail:
            message = f"{message}: {detail}"

        super().__init__(
            message,
            error_code=f"permission_denied.{reason}" if reason else "permission_denied",
            details={
                "action": action,
                "collection": collection,
                "reason": reason,
                "doc_id": doc_id,
                "role": role,
                "field": field,
            },
        )


class CollaboratorTimeoutError(PermissionDeniedError):
    """Raised when a resolver, check or validator does not answer in time."""

    def __init__(self, action: str, collection: Optional[str], *, collaborator: str, timeout: float, doc_id: Optional[str] = None):
        super().__init__(
            action,
            collection,
            reason="timeout",
            doc_id=doc_id,
            detail=f"{collaborator} did not respond within {timeout}s",
        )
        self.collaborator = collaborator
        self.timeout = timeout


# Validation Errors
class ValidationError(OTGuardError):
    """Base class for document validation errors."""
    pass


class ValidationFailedError(ValidationError):
    """Raised when a document fails its schema or a custom validator.

    ``errors`` holds one ``{"code", "path", "message"}`` dict per violation.
    """

    def __init__(self, action: str, summary: str, errors: Optional[List[Dict[str, Any]]] = None, collection: Optional[str] = None, doc_id: Optional[str] = None):
        super().__init__(
            f"Validation failed ({action}) {summary}",
            details={
                "action": action,
                "collection": collection,
                "doc_id": doc_id,
                "errors": errors or [],
            },
        )
        self.action = action
        self.errors = errors or []
        self.collection = collection
        self.doc_id = doc_id


# Upstream Errors
class UpstreamError(OTGuardError):
    """Raised when a collaborator answers with something the gate cannot use."""

    def __init__(self, message: str, collaborator: Optional[str] = None):
        super().__init__(message, details={"collaborator": collaborator})
        self.collaborator = collaborator
