"""Documents feature for otguard.

- entities/: snapshots and json0 sub-operations
- services/: field redaction and operation filtering
"""

from .entities import DocumentSnapshot, SubOperation, parse_operation
from .services import OperationFilter, redact_fields, grants_all_fields

__all__ = [
    "DocumentSnapshot",
    "SubOperation",
    "parse_operation",
    "OperationFilter",
    "redact_fields",
    "grants_all_fields",
]
