"""
Invocation helpers for host-supplied callbacks.

Role resolvers, access checks and custom validators may be plain functions or
coroutines. Every call goes through ``CollaboratorInvoker`` so an optional
timeout applies uniformly and a stalled call becomes a denial.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from ..core.exceptions import CollaboratorTimeoutError, UpstreamError

logger = logging.getLogger(__name__)


class CollaboratorInvoker:
    """Calls host callbacks with an optional per-call timeout."""

    def __init__(self, timeout_seconds: Optional[float] = None):
        self.timeout_seconds = timeout_seconds

    async def call(
        self,
        fn: Callable[..., Any],
        *args: Any,
        action: str,
        collection: Optional[str],
        collaborator: str,
        doc_id: Optional[str] = None,
    ) -> Any:
        """Invoke ``fn(*args)`` and await the result when it is awaitable.

        Exceptions raised by ``fn`` propagate unchanged.

        Raises:
            CollaboratorTimeoutError: If the awaitable exceeds ``timeout_seconds``
        """
        result = fn(*args)
        if not inspect.isawaitable(result):
            return result

        if self.timeout_seconds is None:
            return await result

        try:
            return await asyncio.wait_for(result, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                f"{collaborator} timed out after {self.timeout_seconds}s "
                f"({action}, collection: {collection}, docId: {doc_id})"
            )
            raise CollaboratorTimeoutError(
                action,
                collection,
                collaborator=collaborator,
                timeout=self.timeout_seconds,
                doc_id=doc_id,
            )


def interpret_outcome(outcome: Any, collaborator: str) -> Optional[str]:
    """Translate a check or validator return value into a denial message.

    ``None``, ``True`` and the empty string pass and yield ``None``. ``False``
    denies with an empty message and a non-empty string denies with itself as
    the message.

    Raises:
        UpstreamError: For any other return type
    """
    if outcome is None or outcome is True or outcome == "":
        return None
    if outcome is False:
        return ""
    if isinstance(outcome, str):
        return outcome
    raise UpstreamError(
        f"{collaborator} returned unsupported value of type {type(outcome).__name__}",
        collaborator=collaborator,
    )
