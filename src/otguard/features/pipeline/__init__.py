"""Pipeline feature: request descriptors, the gate orchestrator and backend hooks."""

from .entities import (
    AgentContext,
    OpKind,
    CreateData,
    OpData,
    ReadSnapshotsRequest,
    OpRequest,
    SubmitRequest,
)
from .services import PipelineOrchestrator, MiddlewareBackend, gate_handlers, install

__all__ = [
    "AgentContext",
    "OpKind",
    "CreateData",
    "OpData",
    "ReadSnapshotsRequest",
    "OpRequest",
    "SubmitRequest",
    "PipelineOrchestrator",
    "MiddlewareBackend",
    "gate_handlers",
    "install",
]
