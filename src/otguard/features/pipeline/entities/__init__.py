"""Pipeline entities package."""

from .requests import (
    AgentContext,
    OpKind,
    CreateData,
    OpData,
    ReadSnapshotsRequest,
    OpRequest,
    SubmitRequest,
)

__all__ = [
    "AgentContext",
    "OpKind",
    "CreateData",
    "OpData",
    "ReadSnapshotsRequest",
    "OpRequest",
    "SubmitRequest",
]
