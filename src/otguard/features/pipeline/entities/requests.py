"""Request descriptors handed to the gates by the host pipeline.

These mirror what an OT backend passes to its middleware: the acting agent,
the target collection and document, the operation payload and the current
snapshot. Gates may replace ``OpRequest.op`` and redact snapshot data, and
``SubmitRequest.original_snapshot`` is filled in the first time it is needed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set

from ...documents.entities import DocumentSnapshot, SubOperation, parse_operation


@dataclass
class AgentContext:
    """The connection a request originates from."""

    client_id: Optional[str] = None
    is_server: bool = False
    check_server_access: bool = False
    connect_session: Optional[Mapping[str, Any]] = None
    subscribed_docs: Dict[str, Set[str]] = field(default_factory=dict)
    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def requires_checks(self) -> bool:
        """Internal agents skip the gates unless they opt in with ``check_server_access``."""
        return not self.is_server or self.check_server_access

    @property
    def session(self) -> Mapping[str, Any]:
        return self.connect_session if self.connect_session is not None else {}

    def is_own_op(self, op: "OpData") -> bool:
        return op.src is not None and op.src == self.client_id

    def is_subscribed(self, collection: str, doc_id: str) -> bool:
        return doc_id in self.subscribed_docs.get(collection, ())


class OpKind(str, Enum):
    """Discriminates the operation payload."""

    CREATE = "create"
    DELETE = "delete"
    EDIT = "edit"


@dataclass
class CreateData:
    """Payload of a create operation."""

    data: Any = None
    type: Optional[str] = None


@dataclass
class OpData:
    """An operation as submitted or relayed: create, delete, or an edit list."""

    src: Optional[str] = None
    seq: Optional[int] = None
    v: Optional[int] = None
    create: Optional[CreateData] = None
    delete: bool = False
    op: List[SubOperation] = field(default_factory=list)

    def __post_init__(self):
        self.op = parse_operation(self.op)

    @property
    def kind(self) -> OpKind:
        if self.create is not None:
            return OpKind.CREATE
        if self.delete:
            return OpKind.DELETE
        return OpKind.EDIT


@dataclass
class ReadSnapshotsRequest:
    """Snapshots returned by a fetch, query or subscribe, before they leave the server."""

    agent: AgentContext
    collection: str
    snapshots: List[DocumentSnapshot] = field(default_factory=list)


@dataclass
class OpRequest:
    """An accepted operation about to be relayed to one subscriber."""

    agent: AgentContext
    collection: str
    id: str
    op: OpData


@dataclass
class SubmitRequest:
    """A submitted operation passing through apply and commit."""

    agent: AgentContext
    collection: str
    id: str
    op: OpData
    snapshot: DocumentSnapshot
    original_snapshot: Optional[DocumentSnapshot] = None
