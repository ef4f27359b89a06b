"""Field redaction for documents exposed to readers."""

from typing import Any, Sequence

from ....config.constants import ALL_FIELDS


def grants_all_fields(allowed_fields: Sequence[str]) -> bool:
    """An empty field list or a leading ``"*"`` leaves documents untouched."""
    return not allowed_fields or allowed_fields[0] == ALL_FIELDS


def redact_fields(document: Any, allowed_fields: Sequence[str]) -> Any:
    """Delete every top-level key of ``document`` not in ``allowed_fields``.

    Redacts in place and returns the same object. Non-dict values are returned
    unchanged. Redacting twice with the same fields is a no-op.
    """
    if grants_all_fields(allowed_fields) or not isinstance(document, dict):
        return document

    allowed = set(allowed_fields)
    for key in [key for key in document if key not in allowed]:
        del document[key]

    return document
