"""Collection registry and its builder.

The builder is the only place configuration is assembled: it parses the
host options, registers custom formats, checks every schema eagerly and
normalizes ``check: True`` shorthands. ``build()`` returns a read-only
``CollectionRegistry`` that is shared by every request.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from ....config.constants import Action
from ....config.settings import (
    CollectionOptions,
    GuardOptions,
    RoleOptions,
    RuleOptions,
    get_settings,
)
from ....core.exceptions import InvalidSchemaError, MissingSchemaError
from ...validation.services.schema_engine import SchemaEngine
from ..entities import AccessRule, CollectionConfig, RolePolicy

logger = logging.getLogger(__name__)


class CollectionRegistry(Mapping[str, CollectionConfig]):
    """Immutable table of collection configurations."""

    def __init__(self, collections: Mapping[str, CollectionConfig], god_role: str, schema_engine: SchemaEngine):
        self._collections = MappingProxyType(dict(collections))
        self._god_role = god_role
        self._schema_engine = schema_engine

    @property
    def god_role(self) -> str:
        return self._god_role

    @property
    def schema_engine(self) -> SchemaEngine:
        return self._schema_engine

    def lookup(self, name: Optional[str]) -> Optional[CollectionConfig]:
        if name is None:
            return None
        return self._collections.get(name)

    def __getitem__(self, name: str) -> CollectionConfig:
        return self._collections[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._collections)

    def __len__(self) -> int:
        return len(self._collections)

    def __repr__(self) -> str:
        return f"CollectionRegistry(collections={list(self._collections)})"


def _build_rule(options: Optional[RuleOptions]) -> Optional[AccessRule]:
    if options is None:
        return None
    return AccessRule.build(fields=options.fields, check=options.check)


def _build_policy(options: RoleOptions) -> RolePolicy:
    return RolePolicy(**{
        action.value: _build_rule(getattr(options, action.value))
        for action in Action
    })


class CollectionRegistryBuilder:
    """Assembles and validates collection configuration at startup."""

    def __init__(self, schema_engine: Optional[SchemaEngine] = None, god_role: Optional[str] = None):
        self.schema_engine = schema_engine or SchemaEngine()
        self.god_role = god_role or get_settings().god_role
        self._collections: Dict[str, CollectionConfig] = {}

    @classmethod
    def from_options(cls, options: Union[GuardOptions, Mapping[str, Any]]) -> "CollectionRegistryBuilder":
        """Create a builder from the full configuration surface.

        Formats are registered before any collection schema is checked.

        Raises:
            ConfigurationError: If any collection schema is missing or invalid
        """
        if not isinstance(options, GuardOptions):
            options = GuardOptions.model_validate(options)

        builder = cls(
            schema_engine=SchemaEngine(options.zschema.options),
            god_role=options.options.god_role,
        )
        for name, check in options.zschema.formats.items():
            builder.schema_engine.register_format(name, check)

        for name, collection in options.collections.items():
            builder.register(name, collection)

        return builder

    def register(self, name: str, options: Union[CollectionOptions, Mapping[str, Any]]) -> "CollectionRegistryBuilder":
        """Validate and add one collection.

        Raises:
            MissingSchemaError: If the collection has no schema
            InvalidSchemaError: If the schema engine rejects the schema
        """
        if not isinstance(options, CollectionOptions):
            options = CollectionOptions.model_validate(options)

        if options.json_schema is None:
            logger.error(f"Schema for collection {name} does not exists")
            raise MissingSchemaError(name)

        check = self.schema_engine.check_schema(options.json_schema)
        if not check.is_valid:
            logger.error(f"Schema for collection {name} invalid: {check.summary}")
            raise InvalidSchemaError(name, check.summary, check.errors())

        effective_schema = self.schema_engine.prepare(options.json_schema)
        validators = options.validators

        self._collections[name] = CollectionConfig(
            name=name,
            schema=MappingProxyType(effective_schema),
            get_role=options.get_role,
            roles=MappingProxyType({
                role: _build_policy(role_options)
                for role, role_options in options.roles.items()
            }),
            create_validator=validators.create if validators else None,
            update_validator=validators.update if validators else None,
            validator=self.schema_engine.compile(effective_schema),
        )
        logger.debug(f"Registered collection {name} with roles {sorted(options.roles)}")
        return self

    def build(self) -> CollectionRegistry:
        registry = CollectionRegistry(self._collections, self.god_role, self.schema_engine)
        logger.info(f"Collection registry built with {len(registry)} collections")
        return registry


def build_registry(options: Union[GuardOptions, Mapping[str, Any]]) -> CollectionRegistry:
    """Parse options and build the registry in one step."""
    return CollectionRegistryBuilder.from_options(options).build()
