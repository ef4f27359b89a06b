"""Tests for collection registry construction."""

from types import MappingProxyType

import pytest
from pydantic import ValidationError as OptionsValidationError

from otguard.config.constants import DEFAULT_GOD_ROLE, Action
from otguard.core.exceptions import ConfigurationError, InvalidSchemaError, MissingSchemaError
from otguard.features.collections import (
    ALWAYS_ALLOW,
    AccessRule,
    CollectionRegistryBuilder,
    CustomCheck,
    build_registry,
)
from otguard.features.collections.entities import normalize_check
from otguard.features.validation import SchemaEngine


class TestAccessRule:
    """Rule normalization."""

    def test_true_check_becomes_always_allow(self):
        rule = AccessRule.build(fields=["str_prop"], check=True)

        assert rule.check is ALWAYS_ALLOW
        assert rule.has_handler
        assert rule.check.callback()("id", {}, {}, None) is None

    def test_callable_check_becomes_custom_check(self):
        def check(doc_id, doc, session, request):
            return True

        rule = AccessRule.build(fields=["*"], check=check)

        assert isinstance(rule.check, CustomCheck)
        assert rule.check.callback() is check
        assert rule.all_fields
        assert rule.allows("anything")

    @pytest.mark.parametrize("check", [None, False])
    def test_missing_check_has_no_handler(self, check):
        assert normalize_check(check) is None
        assert not AccessRule.build(fields=["str_prop"], check=check).has_handler

    def test_non_callable_check_rejected(self):
        with pytest.raises(TypeError):
            normalize_check("yes")

    def test_star_only_counts_in_first_position(self):
        rule = AccessRule.build(fields=["str_prop", "*"], check=True)

        assert not rule.all_fields
        assert rule.allows("str_prop")
        assert not rule.allows("num_prop")


class TestCollectionRegistryBuilder:
    """Startup validation and the immutable registry."""

    def test_build_from_options(self, registry):
        config = registry.lookup("test")

        assert list(registry) == ["test"]
        assert registry.god_role == "GOD_ROLE"
        assert config.has_resolver
        assert isinstance(config.roles, MappingProxyType)
        assert config.rule_for("user", Action.READ).fields == ("str_prop", "num_prop")
        assert config.rule_for("user", Action.DELETE).check is ALWAYS_ALLOW
        assert config.rule_for("guest", Action.READ) is None
        assert registry.lookup("nocollection") is None
        assert registry.lookup(None) is None

    def test_assume_additional_closes_object_schemas(self, registry):
        schema = registry["test"].schema

        assert schema["additionalProperties"] is False
        assert schema["properties"]["obj_prop"]["additionalProperties"] is False

    def test_source_schema_not_mutated(self, guard_options):
        build_registry(guard_options)

        assert "additionalProperties" not in guard_options["collections"]["test"]["schema"]

    def test_registry_is_read_only(self, registry):
        with pytest.raises(TypeError):
            registry["test"].roles["intruder"] = None

    def test_missing_schema(self, guard_options):
        del guard_options["collections"]["test"]["schema"]

        with pytest.raises(MissingSchemaError) as exc_info:
            build_registry(guard_options)

        assert str(exc_info.value) == "Schema for collection test does not exists"
        assert isinstance(exc_info.value, ConfigurationError)

    def test_invalid_schema(self, guard_options):
        guard_options["collections"]["test"]["schema"]["properties"]["num_prop"]["type"] = "numeric"

        with pytest.raises(InvalidSchemaError) as exc_info:
            build_registry(guard_options)

        assert str(exc_info.value).startswith("Schema for collection test invalid: ")
        assert exc_info.value.errors

    def test_unknown_keyword_rejected_in_strict_mode(self, guard_options):
        guard_options["collections"]["test"]["schema"]["properties"]["str_prop"]["minLenght"] = 5

        with pytest.raises(InvalidSchemaError) as exc_info:
            build_registry(guard_options)

        assert exc_info.value.errors[0]["code"] == "KEYWORD_UNEXPECTED"
        assert exc_info.value.errors[0]["path"] == "#/properties/str_prop"

    def test_array_without_items_rejected_in_strict_mode(self, guard_options):
        del guard_options["collections"]["test"]["schema"]["properties"]["arr_prop"]["items"]

        with pytest.raises(InvalidSchemaError, match="KEYWORD_UNDEFINED_STRICT"):
            build_registry(guard_options)

    def test_object_without_properties_rejected_in_strict_mode(self, guard_options):
        guard_options["collections"]["test"]["schema"]["properties"]["obj_prop"] = {"type": "object"}

        with pytest.raises(InvalidSchemaError, match="KEYWORD_UNDEFINED_STRICT"):
            build_registry(guard_options)

    def test_lenient_engine_accepts_loose_schema(self):
        builder = CollectionRegistryBuilder(schema_engine=SchemaEngine(), god_role="root")
        builder.register("notes", {"schema": {"type": "object"}, "getRole": lambda *args: "root"})

        registry = builder.build()

        assert registry.lookup("notes").schema == {"type": "object"}
        assert registry.god_role == "root"

    def test_default_god_role(self, monkeypatch):
        from otguard.config.settings import get_settings

        monkeypatch.delenv("OTGUARD_GOD_ROLE", raising=False)
        get_settings.cache_clear()
        try:
            assert CollectionRegistryBuilder().god_role == DEFAULT_GOD_ROLE
        finally:
            get_settings.cache_clear()

    def test_empty_schema_accepts_any_document(self):
        registry = build_registry({"collections": {"anything": {"schema": {}, "getRole": lambda *args: "r"}}})
        config = registry.lookup("anything")

        assert dict(config.schema) == {}
        assert registry.schema_engine.validate({"free": ["form"]}, config.validator).is_valid

    def test_null_schema_is_missing(self):
        with pytest.raises(MissingSchemaError):
            build_registry({"collections": {"anything": {"schema": None, "getRole": lambda *args: "r"}}})

    def test_collection_without_resolver_is_registered(self):
        registry = build_registry({"collections": {"open": {"schema": {"type": "object"}}}})

        assert not registry.lookup("open").has_resolver

    def test_unknown_collection_option_rejected(self, guard_options):
        guard_options["collections"]["test"]["getRoles"] = guard_options["collections"]["test"]["getRole"]

        with pytest.raises(OptionsValidationError):
            build_registry(guard_options)
