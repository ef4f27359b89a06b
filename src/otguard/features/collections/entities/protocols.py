"""Protocol interfaces for host-supplied collection callbacks.

Any of these may be implemented as a plain function or a coroutine function.
"""

from typing import Any, Mapping, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class RoleResolver(Protocol):
    """Yields the acting role for a document and session.

    ``doc`` is the new document on create, the stored document on read and
    delete, the pre-operation document on update, and ``None`` when an
    operation is being relayed to a subscriber. A falsy return means no role.
    """

    def __call__(
        self,
        doc_id: str,
        doc: Optional[Any],
        session: Mapping[str, Any],
        request: Any,
    ) -> Any:
        ...


@runtime_checkable
class DocumentCheck(Protocol):
    """Predicate for read, create and delete rules and the create validator.

    Returns ``None``/``True`` to pass, ``False`` or a message to deny.
    """

    def __call__(
        self,
        doc_id: str,
        doc: Any,
        session: Mapping[str, Any],
        request: Any,
    ) -> Union[None, bool, str, Any]:
        ...


@runtime_checkable
class UpdateCheck(Protocol):
    """Predicate for update rules and the update validator."""

    def __call__(
        self,
        doc_id: str,
        old_doc: Any,
        new_doc: Any,
        session: Mapping[str, Any],
        request: Any,
    ) -> Union[None, bool, str, Any]:
        ...
