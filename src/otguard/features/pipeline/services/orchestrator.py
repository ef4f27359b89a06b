"""Pipeline orchestrator.

Wires role resolution, permission evaluation, redaction, operation filtering
and schema validation into the mediation points of a request's lifecycle:

    read_snapshots   every snapshot leaving the server (fan-out per snapshot)
    filter_op        an accepted edit relayed to one subscriber
    apply            before a submitted op is applied (create and delete rules)
    validate_create  schema and create validator for a created document
    commit           after the op is applied, before it is stored (update rule)
    validate_update  schema and update validator for the new document state

Every gate signals success by returning and failure by raising; the first
failure aborts the request before later gates or storage are reached.
"""

import asyncio
import copy
import dataclasses
import logging
from typing import Any, Mapping, Optional

from ....config.constants import Action, DenialReason
from ....config.settings import GuardSettings, get_settings
from ....core.exceptions import PermissionDeniedError
from ....utils.collaborators import CollaboratorInvoker
from ...collections.entities import CollectionConfig
from ...collections.services import CollectionRegistry
from ...documents.entities import DocumentSnapshot
from ...documents.services import OperationFilter, redact_fields
from ...permissions.entities import AccessDecision
from ...permissions.services import PermissionEvaluator, RoleResolverAdapter
from ...validation.services import SchemaValidationGate
from ..entities import OpKind, OpRequest, ReadSnapshotsRequest, SubmitRequest

logger = logging.getLogger(__name__)

_ACTION_FOR_KIND = {
    OpKind.CREATE: Action.CREATE,
    OpKind.DELETE: Action.DELETE,
    OpKind.EDIT: Action.UPDATE,
}


class PipelineOrchestrator:
    """Runs the authorization and validation gates for one registry."""

    def __init__(
        self,
        registry: CollectionRegistry,
        settings: Optional[GuardSettings] = None,
        invoker: Optional[CollaboratorInvoker] = None,
    ):
        settings = settings or get_settings()
        self.registry = registry
        self.invoker = invoker or CollaboratorInvoker(settings.collaborator_timeout_seconds)
        self.resolver = RoleResolverAdapter(self.invoker)
        self.evaluator = PermissionEvaluator(registry.god_role, self.invoker)
        self.operation_filter = OperationFilter()
        self.schema_gate = SchemaValidationGate(registry.schema_engine, self.invoker)

    # Shared steps

    def _enforced_config(self, collection: Optional[str], action: Action) -> CollectionConfig:
        config = self.registry.lookup(collection)
        if config is None or not config.has_resolver:
            logger.info(f"No access configuration ({action.value}), collection: {collection}")
            raise PermissionDeniedError(action.value, collection, reason=DenialReason.NO_COLLECTION.value)
        return config

    async def _authorize(
        self,
        config: CollectionConfig,
        action: Action,
        doc_id: str,
        doc: Optional[Any],
        session: Mapping[str, Any],
        request: Any,
    ) -> AccessDecision:
        role = await self.resolver.resolve(config, action, doc_id, doc, session, request)
        decision = self.evaluator.evaluate(config, role, action)
        if not decision.allowed:
            logger.info(
                f"Permission denied ({action.value}, {decision.reason.value}), "
                f"collection: {config.name}, docId: {doc_id}, role: {role}"
            )
            raise decision.to_error(action, config.name, doc_id)
        return decision

    # read-gate

    async def read_snapshots(self, request: ReadSnapshotsRequest) -> None:
        """Authorize and redact every snapshot of a read.

        Snapshots are checked concurrently. The first failure is raised; sibling
        checks that already finished keep their redaction, which is discarded
        together with the failed response.

        Raises:
            PermissionDeniedError: If any snapshot may not be read
        """
        agent = request.agent
        if not agent.requires_checks:
            return

        config = self._enforced_config(request.collection, Action.READ)

        if not request.snapshots:
            logger.debug(f"readSnapshots with empty snapshots, collection: {request.collection}")
            return

        session = agent.session
        tasks = [
            asyncio.ensure_future(self._authorize_snapshot(config, snapshot, session, request))
            for snapshot in request.snapshots
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    async def _authorize_snapshot(
        self,
        config: CollectionConfig,
        snapshot: DocumentSnapshot,
        session: Mapping[str, Any],
        request: ReadSnapshotsRequest,
    ) -> None:
        if not snapshot.id:
            logger.debug(f"readSnapshots with empty snapshot id, collection: {config.name}")
            return

        decision = await self._authorize(config, Action.READ, snapshot.id, snapshot.data, session, request)
        if decision.bypass:
            return

        await self.evaluator.run_check(decision, Action.READ, config, snapshot.id, snapshot.data, session, request)
        redact_fields(snapshot.data, decision.rule.fields)

    # broadcast-gate

    async def filter_op(self, request: OpRequest) -> None:
        """Strip what the receiving subscriber may not read from a relayed edit.

        ``request.op`` is replaced, never mutated, because the same operation is
        relayed to every subscriber. Missing configuration, no role or no read
        rule hide the whole edit instead of failing the relay; resolver errors
        still propagate.
        """
        agent = request.agent
        op = request.op

        if not agent.requires_checks:
            return
        if not request.collection or op.kind is not OpKind.EDIT or not op.op:
            return
        if agent.is_own_op(op):
            return
        if not agent.is_subscribed(request.collection, request.id):
            return

        config = self.registry.lookup(request.collection)
        if config is None or not config.has_resolver:
            self._hide_op(request, DenialReason.NO_COLLECTION)
            return

        role = await self.resolver.resolve(config, Action.READ, request.id, None, agent.session, request)
        decision = self.evaluator.evaluate(config, role, Action.READ)
        if not decision.allowed:
            self._hide_op(request, decision.reason, role)
            return

        if decision.all_fields:
            return

        request.op = dataclasses.replace(
            op, op=self.operation_filter.filter_for_read(op.op, decision.rule.fields)
        )

    @staticmethod
    def _hide_op(request: OpRequest, reason: DenialReason, role: Optional[str] = None) -> None:
        logger.debug(
            f"403: Permission denied (read op, {reason.value}), collection: {request.collection}, "
            f"docId: {request.id}, role: {role}"
        )
        request.op = dataclasses.replace(request.op, op=[])

    # apply-gate

    async def apply(self, request: SubmitRequest) -> None:
        """Check create and delete rules before the operation is applied.

        Edits only get their pre-operation snapshot recorded here; their rule is
        checked in ``commit`` against the applied result.

        Raises:
            PermissionDeniedError: If the create or delete is not allowed
        """
        op = request.op
        if request.original_snapshot is None and op.kind is OpKind.EDIT:
            request.original_snapshot = copy.deepcopy(request.snapshot)

        agent = request.agent
        if not agent.requires_checks:
            return

        action = _ACTION_FOR_KIND[op.kind]
        config = self._enforced_config(request.collection, action)
        session = agent.session

        if op.kind is OpKind.CREATE:
            doc = op.create.data
            decision = await self._authorize(config, Action.CREATE, request.id, doc, session, request)
            if decision.bypass:
                return
            if not decision.all_fields and isinstance(doc, dict):
                for field in doc:
                    if not decision.rule.allows(field):
                        logger.info(
                            f"Create with extra field {field}, collection: {config.name}, "
                            f"docId: {request.id}, role: {decision.role}"
                        )
                        raise PermissionDeniedError(
                            Action.CREATE.value,
                            config.name,
                            reason=DenialReason.EXTRA_FIELD.value,
                            doc_id=request.id,
                            role=decision.role,
                            field=field,
                        )
            await self.evaluator.run_check(decision, Action.CREATE, config, request.id, doc, session, request)

        elif op.kind is OpKind.DELETE:
            doc = request.snapshot.data
            decision = await self._authorize(config, Action.DELETE, request.id, doc, session, request)
            await self.evaluator.run_check(decision, Action.DELETE, config, request.id, doc, session, request)

    # create-schema-gate

    async def validate_create(self, request: SubmitRequest) -> None:
        """Validate a created document; runs for internal agents too.

        Raises:
            ValidationFailedError: If the document fails schema or validator
            PermissionDeniedError: If a checked agent creates in an unknown collection
        """
        op = request.op
        if op.kind is not OpKind.CREATE:
            return

        config = self._schema_config(request, Action.CREATE)
        if config is None:
            return

        await self.schema_gate.ensure_valid_create(
            config, request.id, op.create.data, request.agent.session, request
        )

    # commit-gate

    async def commit(self, request: SubmitRequest) -> None:
        """Check the update rule against the applied operation.

        Raises:
            PermissionDeniedError: If the update is not allowed
        """
        agent = request.agent
        op = request.op
        if not agent.requires_checks or op.kind is not OpKind.EDIT:
            return

        config = self._enforced_config(request.collection, Action.UPDATE)
        session = agent.session
        old_doc = self._old_data(request)
        new_doc = request.snapshot.data

        decision = await self._authorize(config, Action.UPDATE, request.id, old_doc, session, request)
        if decision.bypass:
            return

        self.operation_filter.check_for_write(
            op.op,
            decision.rule.fields,
            collection=config.name,
            doc_id=request.id,
            role=decision.role,
        )
        await self.evaluator.run_check(decision, Action.UPDATE, config, request.id, old_doc, new_doc, session, request)

    # update-schema-gate

    async def validate_update(self, request: SubmitRequest) -> None:
        """Validate the document state produced by an edit.

        Raises:
            ValidationFailedError: If the new state fails schema or validator
            PermissionDeniedError: If a checked agent edits an unknown collection
        """
        if request.op.kind is not OpKind.EDIT:
            return

        config = self._schema_config(request, Action.UPDATE)
        if config is None:
            return

        await self.schema_gate.ensure_valid_update(
            config,
            request.id,
            self._old_data(request),
            request.snapshot.data,
            request.agent.session,
            request,
        )

    # Composite entry points

    async def handle_apply(self, request: SubmitRequest) -> None:
        await self.apply(request)
        await self.validate_create(request)

    async def handle_commit(self, request: SubmitRequest) -> None:
        await self.commit(request)
        await self.validate_update(request)

    # Helpers

    def _schema_config(self, request: SubmitRequest, action: Action) -> Optional[CollectionConfig]:
        config = self.registry.lookup(request.collection)
        if config is not None:
            return config
        if not request.agent.requires_checks:
            return None
        logger.info(f"No collection schema ({action.value}), collection: {request.collection}")
        raise PermissionDeniedError(action.value, request.collection, reason=DenialReason.NO_COLLECTION.value)

    @staticmethod
    def _old_data(request: SubmitRequest) -> Any:
        original = request.original_snapshot
        if original is None or not original.data:
            return {}
        return original.data
