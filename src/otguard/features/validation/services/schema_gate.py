"""Schema validation gate.

Runs the collection schema and then the optional custom validator against a
document about to be written. On create the document is the create payload;
on update it is the fully materialized document after the operation was
applied, never the raw operation list.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from ....config.constants import Action
from ....core.exceptions import ValidationFailedError
from ....utils.collaborators import CollaboratorInvoker, interpret_outcome
from ...collections.entities import CollectionConfig
from ..entities import ValidationIssue, ValidationResult
from .schema_engine import SchemaEngine

logger = logging.getLogger(__name__)


class SchemaValidationGate:
    """Validates documents against their collection's schema and validators."""

    def __init__(self, engine: SchemaEngine, invoker: Optional[CollaboratorInvoker] = None):
        self.engine = engine
        self.invoker = invoker or CollaboratorInvoker()

    def validate(self, document: Any, config: CollectionConfig) -> ValidationResult:
        validator = config.validator
        if validator is None:
            validator = self.engine.compile(config.schema)
        return self.engine.validate(document, validator)

    async def ensure_valid_create(
        self,
        config: CollectionConfig,
        doc_id: str,
        doc: Any,
        session: Mapping[str, Any],
        request: Any,
    ) -> None:
        """Validate a created document.

        Raises:
            ValidationFailedError: On schema violations or custom validator rejection
        """
        await self._ensure_valid(
            Action.CREATE, config, doc_id, doc,
            config.create_validator, (doc_id, doc, session, request),
        )

    async def ensure_valid_update(
        self,
        config: CollectionConfig,
        doc_id: str,
        old_doc: Any,
        new_doc: Any,
        session: Mapping[str, Any],
        request: Any,
    ) -> None:
        """Validate the new state of an updated document.

        Raises:
            ValidationFailedError: On schema violations or custom validator rejection
        """
        await self._ensure_valid(
            Action.UPDATE, config, doc_id, new_doc,
            config.update_validator, (doc_id, old_doc, new_doc, session, request),
        )

    async def _ensure_valid(
        self,
        action: Action,
        config: CollectionConfig,
        doc_id: str,
        document: Any,
        custom_validator: Optional[Callable[..., Any]],
        validator_args: Sequence[Any],
    ) -> None:
        result = self.validate(document, config)
        if not result.is_valid:
            logger.info(
                f"Schema validation failed ({action.value}), collection: {config.name}, "
                f"docId: {doc_id}: {result.summary}"
            )
            raise ValidationFailedError(
                action.value,
                result.summary,
                errors=result.errors(),
                collection=config.name,
                doc_id=doc_id,
            )

        if custom_validator is None:
            return

        outcome = await self.invoker.call(
            custom_validator,
            *validator_args,
            action=action.value,
            collection=config.name,
            collaborator=f"{action.value} validator",
            doc_id=doc_id,
        )
        denial = interpret_outcome(outcome, f"{action.value} validator")
        if denial is not None:
            issue = ValidationIssue(code="CUSTOM_VALIDATOR", path="#/", message=denial or "rejected")
            logger.info(
                f"Custom validator rejected ({action.value}), collection: {config.name}, docId: {doc_id}"
            )
            raise ValidationFailedError(
                action.value,
                str(issue),
                errors=[issue.to_dict()],
                collection=config.name,
                doc_id=doc_id,
            )
