"""Configuration module for otguard.

Constants, environment settings, option models and logging setup.
"""

from .constants import (
    ALL_FIELDS,
    ID_FIELD,
    DEFAULT_GOD_ROLE,
    STRUCTURAL_COMPONENTS,
    Action,
    DenialReason,
    HookAction,
)

from .settings import (
    GuardSettings,
    get_settings,
    GuardOptions,
    CollectionOptions,
    RoleOptions,
    RuleOptions,
    ValidatorOptions,
    SchemaEngineOptions,
    SchemaEngineConfig,
    PipelineOptions,
)

from .logging_config import (
    setup_logging,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)

__all__ = [
    # Constants
    "ALL_FIELDS",
    "ID_FIELD",
    "DEFAULT_GOD_ROLE",
    "STRUCTURAL_COMPONENTS",
    "Action",
    "DenialReason",
    "HookAction",

    # Settings
    "GuardSettings",
    "get_settings",
    "GuardOptions",
    "CollectionOptions",
    "RoleOptions",
    "RuleOptions",
    "ValidatorOptions",
    "SchemaEngineOptions",
    "SchemaEngineConfig",
    "PipelineOptions",

    # Logging
    "setup_logging",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",
]
