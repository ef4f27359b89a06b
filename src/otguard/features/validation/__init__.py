"""Validation feature for otguard.

- entities/: validation issues and results
- services/: JSON-Schema engine and the create/update schema gate
"""

from .entities import ValidationIssue, ValidationResult, format_issues
from .services import SchemaEngine, SchemaValidationGate

__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "format_issues",
    "SchemaEngine",
    "SchemaValidationGate",
]
