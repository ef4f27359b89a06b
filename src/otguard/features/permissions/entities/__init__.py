"""Permission entities package."""

from .access_decision import AccessDecision

__all__ = [
    "AccessDecision",
]
