"""Collection entities package.

Access rules, role policies, collection configuration and callback protocols.
"""

from .access_rule import (
    AccessRule,
    AlwaysAllow,
    CustomCheck,
    RuleCheck,
    ALWAYS_ALLOW,
    normalize_check,
)
from .collection_config import CollectionConfig, RolePolicy
from .protocols import RoleResolver, DocumentCheck, UpdateCheck

__all__ = [
    # Domain entities
    "AccessRule",
    "AlwaysAllow",
    "CustomCheck",
    "RuleCheck",
    "ALWAYS_ALLOW",
    "normalize_check",
    "CollectionConfig",
    "RolePolicy",

    # Protocols
    "RoleResolver",
    "DocumentCheck",
    "UpdateCheck",
]
