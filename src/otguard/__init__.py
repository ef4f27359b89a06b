"""otguard - access control and schema validation gates for OT document stores.

Every document read, relayed operation and submitted write passes through
role-based field-level authorization and JSON-Schema validation before it
reaches a client or storage.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from typing import Any, Mapping, Optional, Union

from .__version__ import __version__

from .config import (
    ALL_FIELDS,
    ID_FIELD,
    DEFAULT_GOD_ROLE,
    Action,
    DenialReason,
    HookAction,
    GuardSettings,
    GuardOptions,
    get_settings,
)

from .core.exceptions import (
    OTGuardError,
    ConfigurationError,
    MissingSchemaError,
    InvalidSchemaError,
    AuthorizationError,
    PermissionDeniedError,
    CollaboratorTimeoutError,
    ValidationError,
    ValidationFailedError,
    UpstreamError,
    get_http_status_code,
    create_error_response,
)

from .features.collections import (
    AccessRule,
    CollectionConfig,
    CollectionRegistry,
    CollectionRegistryBuilder,
    build_registry,
)

from .features.documents import DocumentSnapshot, SubOperation

from .features.pipeline import (
    AgentContext,
    CreateData,
    OpData,
    OpKind,
    OpRequest,
    ReadSnapshotsRequest,
    SubmitRequest,
    PipelineOrchestrator,
    MiddlewareBackend,
    install,
)


def create_orchestrator(
    options: Union[GuardOptions, Mapping[str, Any]],
    backend: Optional[MiddlewareBackend] = None,
    settings: Optional[GuardSettings] = None,
) -> PipelineOrchestrator:
    """Build the registry from ``options`` and return an orchestrator for it.

    When ``backend`` is given the gates are installed on it as well.

    Raises:
        ConfigurationError: If a collection schema is missing or invalid
    """
    orchestrator = PipelineOrchestrator(build_registry(options), settings=settings)
    if backend is not None:
        install(backend, orchestrator)
    return orchestrator


__all__ = [
    "__version__",
    "create_orchestrator",

    # Config
    "ALL_FIELDS",
    "ID_FIELD",
    "DEFAULT_GOD_ROLE",
    "Action",
    "DenialReason",
    "HookAction",
    "GuardSettings",
    "GuardOptions",
    "get_settings",

    # Exceptions
    "OTGuardError",
    "ConfigurationError",
    "MissingSchemaError",
    "InvalidSchemaError",
    "AuthorizationError",
    "PermissionDeniedError",
    "CollaboratorTimeoutError",
    "ValidationError",
    "ValidationFailedError",
    "UpstreamError",
    "get_http_status_code",
    "create_error_response",

    # Collections
    "AccessRule",
    "CollectionConfig",
    "CollectionRegistry",
    "CollectionRegistryBuilder",
    "build_registry",

    # Documents
    "DocumentSnapshot",
    "SubOperation",

    # Pipeline
    "AgentContext",
    "CreateData",
    "OpData",
    "OpKind",
    "OpRequest",
    "ReadSnapshotsRequest",
    "SubmitRequest",
    "PipelineOrchestrator",
    "MiddlewareBackend",
    "install",
]
