"""Validation services package."""

from .schema_engine import SchemaEngine, iter_subschemas, json_pointer
from .schema_gate import SchemaValidationGate

__all__ = [
    "SchemaEngine",
    "SchemaValidationGate",
    "iter_subschemas",
    "json_pointer",
]
