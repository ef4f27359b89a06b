"""Tests for the schema engine and the schema validation gate."""

from unittest.mock import AsyncMock

import pytest

from otguard.config.settings import SchemaEngineOptions
from otguard.core.exceptions import UpstreamError, ValidationFailedError
from otguard.features.collections import build_registry
from otguard.features.validation import SchemaEngine, SchemaValidationGate, ValidationIssue, format_issues
from otguard.features.validation.services import json_pointer


class TestSchemaEngine:
    """Schema checking and document validation."""

    def test_json_pointer(self):
        assert json_pointer([]) == "#/"
        assert json_pointer(["obj_prop", "a/b", 0]) == "#/obj_prop/a~1b/0"

    def test_issue_formatting(self):
        issues = [
            ValidationIssue(code="minLength", path="#/str_prop", message="'abc' is too short"),
            ValidationIssue(code="required", path="#/", message="'num_prop' is a required property"),
        ]

        assert format_issues(issues) == (
            "[minLength] [#/str_prop] 'abc' is too short; [required] [#/] 'num_prop' is a required property"
        )

    def test_collects_every_violation(self, registry):
        engine = registry.schema_engine

        result = engine.validate({"str_prop": "abc", "num_prop": "one"}, registry["test"].validator)

        assert not result.is_valid
        assert {(issue.code, issue.path) for issue in result.issues} == {
            ("minLength", "#/str_prop"),
            ("type", "#/num_prop"),
        }

    def test_registered_format(self):
        engine = SchemaEngine()
        engine.register_format("even", lambda value: not isinstance(value, int) or value % 2 == 0)
        validator = engine.compile({"type": "integer", "format": "even"})

        assert engine.validate(4, validator).is_valid
        assert engine.validate(3, validator).issues[0].code == "format"

    def test_lenient_engine_leaves_schema_open(self):
        engine = SchemaEngine(SchemaEngineOptions())
        schema = {"type": "object", "properties": {"a": {"type": "string"}}}

        assert engine.prepare(schema) == schema
        assert engine.check_schema({"type": "object", "custom": 1}).is_valid

    def test_strict_flags_by_alias(self):
        options = SchemaEngineOptions.model_validate({"noExtraKeywords": True, "forceItems": True})
        engine = SchemaEngine(options)

        result = engine.check_schema({"type": "array", "custom": 1})

        assert {issue.code for issue in result.issues} == {"KEYWORD_UNEXPECTED", "KEYWORD_UNDEFINED_STRICT"}


class TestSchemaValidationGate:
    """Schema first, then the custom validator."""

    @pytest.fixture
    def gate(self, registry):
        return SchemaValidationGate(registry.schema_engine)

    @pytest.mark.asyncio
    async def test_valid_create(self, gate, registry, test_item):
        await gate.ensure_valid_create(registry["test"], "id", test_item, {}, None)

    @pytest.mark.asyncio
    async def test_invalid_create(self, gate, registry):
        with pytest.raises(ValidationFailedError) as exc_info:
            await gate.ensure_valid_create(registry["test"], "id", {"title": "x"}, {}, None)

        error = exc_info.value
        assert {item["code"] for item in error.errors} == {"required", "additionalProperties"}
        assert error.details["collection"] == "test"

    @pytest.mark.asyncio
    async def test_validator_not_called_when_schema_fails(self, guard_options):
        validator = AsyncMock(return_value=None)
        guard_options["collections"]["test"]["validators"] = {"create": validator}
        registry = build_registry(guard_options)
        gate = SchemaValidationGate(registry.schema_engine)

        with pytest.raises(ValidationFailedError):
            await gate.ensure_valid_create(registry["test"], "id", {"str_prop": "abc"}, {}, None)

        validator.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_validator_arguments(self, guard_options, test_item):
        validator = AsyncMock(return_value=True)
        guard_options["collections"]["test"]["validators"] = {"update": validator}
        registry = build_registry(guard_options)
        gate = SchemaValidationGate(registry.schema_engine)
        old_doc = dict(test_item, num_prop=1)

        await gate.ensure_valid_update(registry["test"], "id", old_doc, test_item, {"s": 1}, "request")

        validator.assert_awaited_once_with("id", old_doc, test_item, {"s": 1}, "request")

    @pytest.mark.asyncio
    async def test_validator_bad_return_type(self, guard_options, test_item):
        guard_options["collections"]["test"]["validators"] = {"create": lambda *args: {"ok": False}}
        registry = build_registry(guard_options)
        gate = SchemaValidationGate(registry.schema_engine)

        with pytest.raises(UpstreamError):
            await gate.ensure_valid_create(registry["test"], "id", test_item, {}, None)
