"""Constants and enums for otguard.

This module defines the sentinels, action names and denial reasons used
throughout the gate pipeline.
"""

from enum import Enum
from typing import Final


# Field sentinels
ALL_FIELDS: Final[str] = "*"
ID_FIELD: Final[str] = "id"

# Role that bypasses every rule when no godRole is configured
DEFAULT_GOD_ROLE: Final[str] = "NeVeRrOlE, yeah?"


class Action(str, Enum):
    """Document actions governed by a role table."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class DenialReason(str, Enum):
    """Tags attached to permission denials."""

    NO_COLLECTION = "no collection"
    NO_ROLE = "no role"
    NO_HANDLER = "no handler"
    NO_FIELDS = "no fields"
    EXTRA_FIELD = "extra field"
    OP = "op"
    CHECK = "check"
    TIMEOUT = "timeout"


class HookAction(str, Enum):
    """Middleware action names exposed by the host backend."""

    READ_SNAPSHOTS = "readSnapshots"
    OP = "op"
    APPLY = "apply"
    COMMIT = "commit"


# json0 components carrying whole-document payloads
STRUCTURAL_COMPONENTS: Final[tuple] = ("od", "oi", "li", "ld")
