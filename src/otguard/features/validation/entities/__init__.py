"""Validation entities package."""

from .validation_result import ValidationIssue, ValidationResult, format_issues

__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "format_issues",
]
