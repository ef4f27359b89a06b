"""Pipeline services."""

from .orchestrator import PipelineOrchestrator
from .backend_hooks import MiddlewareBackend, gate_handlers, install

__all__ = [
    "PipelineOrchestrator",
    "MiddlewareBackend",
    "gate_handlers",
    "install",
]
