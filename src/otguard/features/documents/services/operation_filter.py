"""OT operation filtering.

The read path strips what a subscriber may not see from an operation being
relayed to them. The write path rejects an update touching a field the
author may not write. Reads degrade silently, writes fail closed.
"""

import copy
import logging
from typing import List, Optional, Sequence

from ....config.constants import ALL_FIELDS, ID_FIELD, STRUCTURAL_COMPONENTS, Action, DenialReason
from ....core.exceptions import PermissionDeniedError
from ..entities import SubOperation
from .field_redactor import redact_fields

logger = logging.getLogger(__name__)


def _is_all_fields(allowed_fields: Sequence[str]) -> bool:
    return bool(allowed_fields) and allowed_fields[0] == ALL_FIELDS


class OperationFilter:
    """Field-level filtering of json0 change-lists."""

    def filter_for_read(self, sub_ops: Sequence[SubOperation], allowed_fields: Sequence[str]) -> List[SubOperation]:
        """Return the sub-operations a reader limited to ``allowed_fields`` may see.

        The input is never mutated; a filtered deep copy is returned. An empty
        field list hides every field except ``id``.
        """
        if _is_all_fields(allowed_fields):
            return list(sub_ops)

        allowed = set(allowed_fields)
        structural_allowed = list(allowed_fields) + [ID_FIELD]

        visible = [
            copy.deepcopy(sub_op) for sub_op in sub_ops
            if sub_op.is_whole_document or sub_op.top_field in allowed
        ]

        for sub_op in visible:
            if not sub_op.is_whole_document:
                continue
            for kind in STRUCTURAL_COMPONENTS:
                payload = sub_op.payload(kind)
                if isinstance(payload, dict):
                    redact_fields(payload, structural_allowed)

        dropped = len(sub_ops) - len(visible)
        if dropped:
            logger.debug(f"Dropped {dropped} of {len(sub_ops)} sub-operations for restricted reader")

        return visible

    def check_for_write(
        self,
        sub_ops: Sequence[SubOperation],
        allowed_fields: Sequence[str],
        *,
        collection: str,
        doc_id: str,
        role: Optional[str],
    ) -> None:
        """Reject an update touching a field outside ``allowed_fields``.

        Raises:
            PermissionDeniedError: On the first disallowed field found
        """
        if _is_all_fields(allowed_fields):
            return

        allowed = set(allowed_fields)
        structural_allowed = allowed | {ID_FIELD}

        for sub_op in sub_ops:
            if not sub_op.is_whole_document and sub_op.top_field not in allowed:
                raise self._denied(collection, doc_id, role, sub_op.top_field)

            new_data = sub_op.payload("oi")
            if sub_op.is_whole_document and isinstance(new_data, dict):
                for key in new_data:
                    if key not in structural_allowed:
                        raise self._denied(collection, doc_id, role, key)

    @staticmethod
    def _denied(collection: str, doc_id: str, role: Optional[str], field: str) -> PermissionDeniedError:
        logger.info(
            f"Update touches disallowed field {field}, collection: {collection}, docId: {doc_id}, role: {role}"
        )
        return PermissionDeniedError(
            Action.UPDATE.value,
            collection,
            reason=DenialReason.OP.value,
            doc_id=doc_id,
            role=role,
            field=str(field),
        )
