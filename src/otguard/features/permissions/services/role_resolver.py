"""Role resolver adapter.

Calls a collection's role resolver and normalizes its answer. Resolvers are
expected to be read-only: a read fan-out may call them for sibling snapshots
even after another snapshot has already failed.
"""

import logging
from typing import Any, Mapping, Optional

from ....config.constants import Action
from ....core.exceptions import UpstreamError
from ....utils.collaborators import CollaboratorInvoker
from ...collections.entities import CollectionConfig

logger = logging.getLogger(__name__)


class RoleResolverAdapter:
    """Resolves the acting role for one document and session."""

    def __init__(self, invoker: Optional[CollaboratorInvoker] = None):
        self.invoker = invoker or CollaboratorInvoker()

    async def resolve(
        self,
        config: CollectionConfig,
        action: Action,
        doc_id: str,
        doc: Optional[Any],
        session: Mapping[str, Any],
        request: Any,
    ) -> Optional[str]:
        """Return the role name, or ``None`` when the resolver yields no role.

        Errors raised by the resolver propagate unchanged.

        Raises:
            UpstreamError: If the resolver returns a truthy non-string value
        """
        role = await self.invoker.call(
            config.get_role,
            doc_id,
            doc,
            session,
            request,
            action=Action(action).value,
            collection=config.name,
            collaborator="role resolver",
            doc_id=doc_id,
        )

        if not role:
            logger.debug(f"No role resolved ({Action(action).value}), collection: {config.name}, docId: {doc_id}")
            return None

        if not isinstance(role, str):
            raise UpstreamError(
                f"Role resolver for collection {config.name} returned {type(role).__name__}, expected str",
                collaborator="role resolver",
            )

        return role
