"""Permission evaluator.

Maps a resolved role onto the collection's role table and runs the rule's
predicate. Evaluation itself is pure; only ``run_check`` calls out to the host.
"""

import logging
from typing import Any, Optional

from ....config.constants import Action, DenialReason
from ....core.exceptions import PermissionDeniedError
from ....utils.collaborators import CollaboratorInvoker, interpret_outcome
from ...collections.entities import CollectionConfig
from ..entities import AccessDecision

logger = logging.getLogger(__name__)

# Actions whose rules must list at least one field
FIELD_RESTRICTED_ACTIONS = frozenset({Action.CREATE, Action.UPDATE})


class PermissionEvaluator:
    """Evaluates roles against role tables."""

    def __init__(self, god_role: str, invoker: Optional[CollaboratorInvoker] = None):
        self.god_role = god_role
        self.invoker = invoker or CollaboratorInvoker()

    def evaluate(self, config: CollectionConfig, role: Optional[str], action: Action) -> AccessDecision:
        """Return the decision for ``role`` performing ``action`` on the collection."""
        action = Action(action)

        if not role:
            return AccessDecision.denied(DenialReason.NO_ROLE)

        if role == self.god_role:
            return AccessDecision.god(role)

        rule = config.rule_for(role, action)
        if rule is None or not rule.has_handler:
            return AccessDecision.denied(DenialReason.NO_HANDLER, role)

        if action in FIELD_RESTRICTED_ACTIONS and not rule.has_fields:
            return AccessDecision.denied(DenialReason.NO_FIELDS, role)

        return AccessDecision.granted(role, rule)

    async def run_check(
        self,
        decision: AccessDecision,
        action: Action,
        config: CollectionConfig,
        doc_id: str,
        *args: Any,
    ) -> None:
        """Run the rule's predicate with ``(doc_id, *args)``.

        Raises:
            PermissionDeniedError: If the predicate returns ``False`` or a message
        """
        if decision.bypass:
            return
        if not decision.allowed or decision.rule is None or decision.rule.check is None:
            raise decision.to_error(action, config.name, doc_id)

        action = Action(action)
        outcome = await self.invoker.call(
            decision.rule.check.callback(),
            doc_id,
            *args,
            action=action.value,
            collection=config.name,
            collaborator=f"{action.value} check",
            doc_id=doc_id,
        )

        denial = interpret_outcome(outcome, f"{action.value} check")
        if denial is not None:
            logger.info(
                f"Check rejected ({action.value}), collection: {config.name}, "
                f"docId: {doc_id}, role: {decision.role}"
            )
            raise PermissionDeniedError(
                action.value,
                config.name,
                reason=DenialReason.CHECK.value,
                doc_id=doc_id,
                role=decision.role,
                detail=denial or None,
            )
