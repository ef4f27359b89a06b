"""Document entities package."""

from .operation import SubOperation, parse_operation
from .snapshot import DocumentSnapshot

__all__ = [
    "SubOperation",
    "parse_operation",
    "DocumentSnapshot",
]
