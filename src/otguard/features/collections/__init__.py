"""Collections feature for otguard.

- entities/: access rules, role policies, collection configuration
- services/: registry builder and the immutable registry
"""

# Entities first: validation services import them while this package loads
from .entities import (
    AccessRule,
    AlwaysAllow,
    CustomCheck,
    ALWAYS_ALLOW,
    CollectionConfig,
    RolePolicy,
    RoleResolver,
    DocumentCheck,
    UpdateCheck,
)

from .services import CollectionRegistry, CollectionRegistryBuilder, build_registry

__all__ = [
    # Entities
    "AccessRule",
    "AlwaysAllow",
    "CustomCheck",
    "ALWAYS_ALLOW",
    "CollectionConfig",
    "RolePolicy",

    # Protocols
    "RoleResolver",
    "DocumentCheck",
    "UpdateCheck",

    # Services
    "CollectionRegistry",
    "CollectionRegistryBuilder",
    "build_registry",
]
