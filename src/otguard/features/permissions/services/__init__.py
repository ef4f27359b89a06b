"""Permission services package."""

from .role_resolver import RoleResolverAdapter
from .permission_evaluator import PermissionEvaluator

__all__ = [
    "RoleResolverAdapter",
    "PermissionEvaluator",
]
