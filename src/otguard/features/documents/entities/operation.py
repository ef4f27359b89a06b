"""json0 operation components.

A sub-operation is a path ``p`` plus one or more mutation components
(``oi``, ``od``, ``li``, ``ld``, ``na``, ``si``, ``sd``, ``lm``, ``t``/``o``).
An empty path addresses the whole document; otherwise ``p[0]`` is the
top-level field the sub-operation touches.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union


@dataclass
class SubOperation:
    """One component of an OT change-list."""

    path: List[Any] = field(default_factory=list)
    components: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SubOperation":
        return cls(
            path=list(raw.get("p") or []),
            components={key: value for key, value in raw.items() if key != "p"},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"p": list(self.path), **self.components}

    @property
    def is_whole_document(self) -> bool:
        return len(self.path) == 0

    @property
    def top_field(self) -> Optional[Any]:
        """Top-level field touched, ``None`` for whole-document operations."""
        return self.path[0] if self.path else None

    def has(self, kind: str) -> bool:
        return kind in self.components

    def payload(self, kind: str) -> Any:
        return self.components.get(kind)


def parse_operation(raw: Optional[Iterable[Union[SubOperation, Mapping[str, Any]]]]) -> List[SubOperation]:
    """Accept sub-operations or their json0 dict form."""
    if not raw:
        return []
    return [
        item if isinstance(item, SubOperation) else SubOperation.from_dict(item)
        for item in raw
    ]
