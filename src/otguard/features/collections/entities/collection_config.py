"""Collection configuration entities.

A ``CollectionConfig`` bundles everything the gates need for one collection:
the effective JSON schema and its compiled validator, the role resolver, the
role table and the optional custom validators. Instances are produced by
``CollectionRegistryBuilder`` and never modified afterwards.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ....config.constants import Action
from .access_rule import AccessRule
from .protocols import DocumentCheck, RoleResolver, UpdateCheck


@dataclass(frozen=True)
class RolePolicy:
    """Access rules of one role, one optional rule per action."""

    create: Optional[AccessRule] = None
    read: Optional[AccessRule] = None
    update: Optional[AccessRule] = None
    delete: Optional[AccessRule] = None

    def rule_for(self, action: Action) -> Optional[AccessRule]:
        return getattr(self, Action(action).value)


@dataclass(frozen=True)
class CollectionConfig:
    """Immutable per-collection configuration."""

    name: str
    schema: Mapping[str, Any]
    get_role: Optional[RoleResolver]
    roles: Mapping[str, RolePolicy] = field(default_factory=lambda: MappingProxyType({}))
    create_validator: Optional[DocumentCheck] = None
    update_validator: Optional[UpdateCheck] = None

    # Compiled schema validator, shared read-only across requests
    validator: Any = field(default=None, compare=False, repr=False)

    @property
    def has_resolver(self) -> bool:
        """Collections without a role resolver deny every checked request."""
        return self.get_role is not None

    def policy_for(self, role: str) -> Optional[RolePolicy]:
        return self.roles.get(role)

    def rule_for(self, role: str, action: Action) -> Optional[AccessRule]:
        policy = self.policy_for(role)
        if policy is None:
            return None
        return policy.rule_for(action)
