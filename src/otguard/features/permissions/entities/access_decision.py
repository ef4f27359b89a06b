"""Access decision result type."""

from dataclasses import dataclass
from typing import Optional

from ....config.constants import Action, DenialReason
from ....core.exceptions import PermissionDeniedError
from ...collections.entities import AccessRule


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of evaluating a role against a collection's role table.

    A granted decision carries the applicable rule, or ``bypass=True`` for the
    god role. A denied decision carries the reason tag.
    """

    allowed: bool
    role: Optional[str] = None
    rule: Optional[AccessRule] = None
    bypass: bool = False
    reason: Optional[DenialReason] = None

    @classmethod
    def granted(cls, role: str, rule: AccessRule) -> "AccessDecision":
        return cls(allowed=True, role=role, rule=rule)

    @classmethod
    def god(cls, role: str) -> "AccessDecision":
        return cls(allowed=True, role=role, bypass=True)

    @classmethod
    def denied(cls, reason: DenialReason, role: Optional[str] = None) -> "AccessDecision":
        return cls(allowed=False, role=role, reason=reason)

    @property
    def all_fields(self) -> bool:
        """True when no field restriction applies."""
        return self.bypass or (self.rule is not None and self.rule.all_fields)

    def to_error(self, action: Action, collection: str, doc_id: Optional[str] = None) -> PermissionDeniedError:
        return PermissionDeniedError(
            Action(action).value,
            collection,
            reason=self.reason.value if self.reason else None,
            doc_id=doc_id,
            role=self.role,
        )
