"""Document snapshot entity.

Snapshots belong to the storage engine. The gates read them and, on the
read path, redact ``data`` in place before it is returned to the requester.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class DocumentSnapshot:
    """A document as stored: id, version, OT type and JSON-like data."""

    id: Optional[str]
    data: Any = None
    v: Optional[int] = None
    type: Optional[str] = None

    @property
    def exists(self) -> bool:
        return self.data is not None
