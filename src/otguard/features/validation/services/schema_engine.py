"""JSON-Schema engine wrapper.

Wraps ``jsonschema``'s Draft 7 validator with the strictness flags the
collection configuration can request and a format checker carrying the
host's named string formats.
"""

import copy
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from ....config.settings import SchemaEngineOptions
from ..entities import ValidationIssue, ValidationResult

logger = logging.getLogger(__name__)


KNOWN_KEYWORDS = frozenset(Draft7Validator.META_SCHEMA.get("properties", {})) | {"writeOnly"}

_SCHEMA_MAP_KEYWORDS = ("properties", "patternProperties", "definitions")
_SCHEMA_LIST_KEYWORDS = ("allOf", "anyOf", "oneOf")
_SCHEMA_KEYWORDS = ("additionalItems", "additionalProperties", "contains", "propertyNames", "if", "then", "else", "not")


def json_pointer(parts: Iterable[Any]) -> str:
    """Build a ``#/``-rooted JSON pointer from path segments."""
    escaped = [str(part).replace("~", "~0").replace("/", "~1") for part in parts]
    return "#/" + "/".join(escaped)


def issue_from_error(error: JsonSchemaValidationError) -> ValidationIssue:
    return ValidationIssue(
        code=str(error.validator),
        path=json_pointer(error.absolute_path),
        message=error.message,
    )


def iter_subschemas(schema: Any, path: Tuple[Any, ...] = ()) -> Iterator[Tuple[Tuple[Any, ...], Dict[str, Any]]]:
    """Yield ``(path, subschema)`` for the schema and every nested subschema."""
    if not isinstance(schema, dict):
        return
    yield path, schema

    for keyword in _SCHEMA_MAP_KEYWORDS:
        members = schema.get(keyword)
        if isinstance(members, dict):
            for name, sub in members.items():
                yield from iter_subschemas(sub, path + (keyword, name))

    items = schema.get("items")
    if isinstance(items, dict):
        yield from iter_subschemas(items, path + ("items",))
    elif isinstance(items, list):
        for index, sub in enumerate(items):
            yield from iter_subschemas(sub, path + ("items", index))

    dependencies = schema.get("dependencies")
    if isinstance(dependencies, dict):
        for name, sub in dependencies.items():
            yield from iter_subschemas(sub, path + ("dependencies", name))

    for keyword in _SCHEMA_LIST_KEYWORDS:
        members = schema.get(keyword)
        if isinstance(members, list):
            for index, sub in enumerate(members):
                yield from iter_subschemas(sub, path + (keyword, index))

    for keyword in _SCHEMA_KEYWORDS:
        yield from iter_subschemas(schema.get(keyword), path + (keyword,))


def _declares_type(schema: Mapping[str, Any], type_name: str) -> bool:
    declared = schema.get("type")
    if isinstance(declared, list):
        return type_name in declared
    return declared == type_name


class SchemaEngine:
    """Checks collection schemas and validates documents against them.

    The engine is stateless after formats are registered and can be shared by
    concurrent requests.
    """

    def __init__(self, options: Optional[SchemaEngineOptions] = None):
        self.options = options or SchemaEngineOptions()
        self.format_checker = FormatChecker()

    def register_format(self, name: str, check: Callable[[Any], bool]) -> None:
        """Register a named string format; must happen before schemas are compiled."""
        self.format_checker.checks(name)(check)
        logger.debug(f"Format registered: {name}")

    def check_schema(self, schema: Mapping[str, Any]) -> ValidationResult:
        """Validate a schema against the Draft 7 meta-schema and strictness flags."""
        meta_validator = Draft7Validator(Draft7Validator.META_SCHEMA)
        issues: List[ValidationIssue] = [
            issue_from_error(error) for error in meta_validator.iter_errors(schema)
        ]

        for path, subschema in iter_subschemas(schema):
            issues.extend(self._strictness_issues(path, subschema))

        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.success()

    def _strictness_issues(self, path: Tuple[Any, ...], subschema: Mapping[str, Any]) -> List[ValidationIssue]:
        issues = []
        pointer = json_pointer(path)

        if self.options.no_extra_keywords:
            for keyword in subschema:
                if keyword not in KNOWN_KEYWORDS:
                    issues.append(ValidationIssue(
                        code="KEYWORD_UNEXPECTED",
                        path=pointer,
                        message=f"Keyword is not recognized: {keyword}",
                    ))

        if self.options.force_properties and _declares_type(subschema, "object"):
            if "properties" not in subschema and "patternProperties" not in subschema:
                issues.append(ValidationIssue(
                    code="KEYWORD_UNDEFINED_STRICT",
                    path=pointer,
                    message="Keyword 'properties' must be defined in strict mode",
                ))

        if self.options.force_items and _declares_type(subschema, "array"):
            if "items" not in subschema:
                issues.append(ValidationIssue(
                    code="KEYWORD_UNDEFINED_STRICT",
                    path=pointer,
                    message="Keyword 'items' must be defined in strict mode",
                ))

        return issues

    def prepare(self, schema: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the effective schema used for validation.

        With ``assume_additional`` every subschema that lists ``properties``
        without an explicit ``additionalProperties`` is closed.
        """
        effective = copy.deepcopy(dict(schema))
        if self.options.assume_additional:
            for _, subschema in iter_subschemas(effective):
                if "properties" in subschema and "additionalProperties" not in subschema:
                    subschema["additionalProperties"] = False
        return effective

    def compile(self, schema: Mapping[str, Any]) -> Draft7Validator:
        return Draft7Validator(schema, format_checker=self.format_checker)

    def validate(self, document: Any, validator: Draft7Validator) -> ValidationResult:
        """Validate a document, collecting every violation."""
        errors = sorted(validator.iter_errors(document), key=lambda e: [str(part) for part in e.absolute_path])
        if not errors:
            return ValidationResult.success()
        return ValidationResult.failure([issue_from_error(error) for error in errors])
