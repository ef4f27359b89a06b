"""Access rule value objects.

An access rule is the allowed-field set plus predicate for one
(collection, role, action) triple. The predicate is an explicit variant,
``AlwaysAllow`` or ``CustomCheck``, resolved once when the rule is built.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Tuple, Union

from ....config.constants import ALL_FIELDS


@dataclass(frozen=True)
class AlwaysAllow:
    """Predicate variant that accepts every request."""

    def callback(self) -> Callable[..., Any]:
        return _always_allow

    def __repr__(self) -> str:
        return "AlwaysAllow()"


def _always_allow(*args: Any) -> None:
    return None


ALWAYS_ALLOW = AlwaysAllow()


@dataclass(frozen=True)
class CustomCheck:
    """Predicate variant wrapping a host callback.

    Read, create and delete checks receive ``(doc_id, doc, session, request)``;
    update checks receive ``(doc_id, old_doc, new_doc, session, request)``.
    """

    predicate: Callable[..., Any]

    def __post_init__(self):
        if not callable(self.predicate):
            raise TypeError(f"CustomCheck predicate must be callable, got {type(self.predicate).__name__}")

    def callback(self) -> Callable[..., Any]:
        return self.predicate


RuleCheck = Union[AlwaysAllow, CustomCheck]


def normalize_check(check: Any) -> Optional[RuleCheck]:
    """Convert the host's ``check`` option into a predicate variant.

    ``True`` becomes ``AlwaysAllow``, a callable becomes ``CustomCheck`` and
    ``None``/``False`` mean the rule has no handler.
    """
    if check is True:
        return ALWAYS_ALLOW
    if check is None or check is False:
        return None
    if isinstance(check, (AlwaysAllow, CustomCheck)):
        return check
    return CustomCheck(check)


@dataclass(frozen=True)
class AccessRule:
    """Allowed fields plus predicate for one role and action."""

    fields: Tuple[str, ...] = ()
    check: Optional[RuleCheck] = None

    @classmethod
    def build(cls, fields: Optional[Iterable[str]] = None, check: Any = None) -> "AccessRule":
        return cls(fields=tuple(fields or ()), check=normalize_check(check))

    @property
    def all_fields(self) -> bool:
        """True when the rule grants every field (``"*"`` in first position)."""
        return bool(self.fields) and self.fields[0] == ALL_FIELDS

    @property
    def has_fields(self) -> bool:
        return len(self.fields) > 0

    @property
    def has_handler(self) -> bool:
        return self.check is not None

    def allows(self, field: str) -> bool:
        return self.all_fields or field in self.fields
