"""Document services package."""

from .field_redactor import redact_fields, grants_all_fields
from .operation_filter import OperationFilter

__all__ = [
    "redact_fields",
    "grants_all_fields",
    "OperationFilter",
]
