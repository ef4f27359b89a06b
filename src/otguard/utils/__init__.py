"""Utilities module for otguard."""

from .collaborators import CollaboratorInvoker, interpret_outcome

__all__ = [
    "CollaboratorInvoker",
    "interpret_outcome",
]
