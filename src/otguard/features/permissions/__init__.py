"""Permissions feature for otguard.

- entities/: the access decision result type
- services/: role resolution and permission evaluation
"""

from .entities import AccessDecision
from .services import RoleResolverAdapter, PermissionEvaluator

__all__ = [
    "AccessDecision",
    "RoleResolverAdapter",
    "PermissionEvaluator",
]
