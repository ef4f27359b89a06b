"""Registration of the gates on a host backend.

The host exposes ``use(action, handler)`` and invokes every handler registered
for an action in registration order, awaiting each one and aborting the request
on the first raised error.
"""

import logging
from typing import Any, Awaitable, Callable, List, Protocol, Tuple, runtime_checkable

from ....config.constants import HookAction
from .orchestrator import PipelineOrchestrator

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[None]]


@runtime_checkable
class MiddlewareBackend(Protocol):
    """Host backend that accepts middleware per action."""

    def use(self, action: str, handler: Handler) -> Any:
        ...


def gate_handlers(orchestrator: PipelineOrchestrator) -> List[Tuple[HookAction, Handler]]:
    """Gate handlers in the order they must run."""
    return [
        (HookAction.READ_SNAPSHOTS, orchestrator.read_snapshots),
        (HookAction.OP, orchestrator.filter_op),
        (HookAction.APPLY, orchestrator.apply),
        (HookAction.APPLY, orchestrator.validate_create),
        (HookAction.COMMIT, orchestrator.commit),
        (HookAction.COMMIT, orchestrator.validate_update),
    ]


def install(backend: MiddlewareBackend, orchestrator: PipelineOrchestrator) -> PipelineOrchestrator:
    """Register every gate of ``orchestrator`` on ``backend``."""
    for action, handler in gate_handlers(orchestrator):
        backend.use(action.value, handler)
        logger.debug(f"Registered {handler.__name__} for {action.value}")

    logger.info(f"Installed gates for collections {sorted(orchestrator.registry)}")
    return orchestrator
