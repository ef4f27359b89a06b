"""
Runtime settings for otguard.

Environment-driven settings plus the pydantic models that parse the
collection configuration surface handed to the registry builder.
"""
from typing import Any, Callable, Dict, Optional, Union
from functools import lru_cache
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_GOD_ROLE


class GuardSettings(BaseSettings):
    """Process-wide settings read from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="OTGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    god_role: str = Field(default=DEFAULT_GOD_ROLE)

    # Upper bound for a single resolver, check or validator call; None waits forever
    collaborator_timeout_seconds: Optional[float] = Field(default=None, gt=0)


@lru_cache()
def get_settings() -> GuardSettings:
    """Get cached settings instance."""
    return GuardSettings()


CheckOption = Union[Callable[..., Any], bool, None]


class RuleOptions(BaseModel):
    """One access rule as supplied by the host (``fields`` plus ``check``)."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    fields: Optional[list[str]] = None
    check: CheckOption = None


class RoleOptions(BaseModel):
    """Per-action rules for a single role."""

    model_config = ConfigDict(extra="forbid")

    create: Optional[RuleOptions] = None
    read: Optional[RuleOptions] = None
    update: Optional[RuleOptions] = None
    delete: Optional[RuleOptions] = None


class ValidatorOptions(BaseModel):
    """Custom validators run after the schema check."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    create: Optional[Callable[..., Any]] = None
    update: Optional[Callable[..., Any]] = None


class CollectionOptions(BaseModel):
    """Configuration of one collection."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True, extra="forbid")

    json_schema: Optional[Dict[str, Any]] = Field(default=None, alias="schema")
    get_role: Optional[Callable[..., Any]] = Field(default=None, alias="getRole")
    roles: Dict[str, RoleOptions] = Field(default_factory=dict)
    validators: Optional[ValidatorOptions] = None


class SchemaEngineOptions(BaseModel):
    """Strictness flags for the schema engine."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    no_extra_keywords: bool = Field(default=False, alias="noExtraKeywords")
    assume_additional: bool = Field(default=False, alias="assumeAdditional")
    force_properties: bool = Field(default=False, alias="forceProperties")
    force_items: bool = Field(default=False, alias="forceItems")


class SchemaEngineConfig(BaseModel):
    """``zschema`` section: engine options plus named string formats."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    options: SchemaEngineOptions = Field(default_factory=SchemaEngineOptions)
    formats: Dict[str, Callable[[Any], bool]] = Field(default_factory=dict)


class PipelineOptions(BaseModel):
    """``options`` section."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    god_role: Optional[str] = Field(default=None, alias="godRole")


class GuardOptions(BaseModel):
    """Whole configuration surface accepted at startup."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    collections: Dict[str, CollectionOptions] = Field(default_factory=dict)
    options: PipelineOptions = Field(default_factory=PipelineOptions)
    zschema: SchemaEngineConfig = Field(default_factory=SchemaEngineConfig)
