"""Tests for definition normalization, merging and YAML loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from request_model.definitions import (
    DEFAULT_SOURCES,
    FieldDefinition,
    Validation,
    compile_definition,
    compile_field,
    load_definition,
    merge_definitions,
)

SAMPLES = Path(__file__).parent / "samples"


class TestCompileField:
    """Shorthand and record normalization."""

    def test_type_name_shorthand_is_required(self):
        field = compile_field("customer", "string")
        assert field.type == "string"
        assert field.is_required

    def test_record_without_default_is_required(self):
        assert compile_field("x", {"type": "int"}).is_required

    def test_default_makes_field_optional(self):
        assert not compile_field("x", {"type": "int", "default": 10}).is_required

    def test_explicit_required_wins(self):
        assert compile_field("x", {"type": "int", "default": 10, "required": True}).is_required
        assert not compile_field("x", {"type": "int", "required": False}).is_required

    def test_type_defaults_to_string(self):
        assert compile_field("x", {}).type == "string"

    def test_lookup_name(self):
        assert compile_field("food", {"name": "food_choice"}).lookup_name == "food_choice"
        assert compile_field("food", "string").lookup_name == "food"

    def test_default_sources(self):
        assert compile_field("x", "string").lookup_sources == DEFAULT_SOURCES

    def test_configured_sources(self):
        field = compile_field("x", {"sources": ["body", "query"]})
        assert field.lookup_sources == ("body", "query")

    def test_object_fields_only_read_body(self):
        field = compile_field("x", {"type": "object", "sources": ["params", "query"]})
        assert field.lookup_sources == ("body",)

    def test_unknown_type_is_accepted_until_request_time(self):
        assert compile_field("x", "badType").type == "badType"

    def test_unknown_source_is_rejected(self):
        with pytest.raises(ValidationError):
            compile_field("x", {"sources": ["headers"]})

    def test_unknown_key_is_rejected(self):
        with pytest.raises(ValidationError):
            compile_field("x", {"type": "string", "min": 3})

    def test_non_mapping_record_is_rejected(self):
        with pytest.raises(ValueError, match="must be a type name or a mapping"):
            compile_field("x", 42)

    def test_existing_definition_is_rekeyed(self):
        field = FieldDefinition(key="a", type="int")
        assert compile_field("a", field) is field
        assert compile_field("b", field).key == "b"

    def test_default_producer_is_called(self):
        field = compile_field("x", {"default": lambda: "now"})
        assert field.resolve_default() == "now"

    def test_compile_keeps_declaration_order(self):
        compiled = compile_definition({"z": "string", "a": "int", "m": "bool"})
        assert list(compiled) == ["z", "a", "m"]


class TestValidation:
    """Normalization of the accepted validation rule shapes."""

    def test_bare_predicate_uses_generic_message(self):
        rule = Validation.from_rule(lambda s: len(s) == 2)
        assert rule.check("CA")
        assert not rule.check("Cal")
        assert rule.describe("state", "Cal") == "state failed validation"

    def test_predicate_with_literal_message(self):
        rule = Validation.from_rule({"isValid": lambda n: n > 0, "message": "must be positive"})
        assert rule.describe("n", -1) == "must be positive"

    def test_predicate_with_message_builder(self):
        rule = Validation.from_rule(
            {"is_valid": lambda n: n > 0, "message": lambda n: f"{n} is not positive"}
        )
        assert rule.describe("n", -1) == "-1 is not positive"

    def test_pattern_must_match_whole_value(self):
        rule = Validation.from_rule({"pattern": "[0-9]{5}"})
        assert rule.check("94105")
        assert not rule.check("941050")
        assert rule.check(94105)

    def test_mapping_without_predicate(self):
        with pytest.raises(ValueError, match="isValid"):
            Validation.from_rule({"message": "nope"})

    def test_bad_rule_inside_a_record(self):
        with pytest.raises(ValidationError):
            compile_field("x", {"validation": 5})


class TestMerge:
    """Definition composition."""

    def test_merge_combines_and_later_wins(self):
        merged = merge_definitions({"a": "string", "b": "int"}, {"b": "float", "c": "bool"})
        assert merged == {"a": "string", "b": "float", "c": "bool"}
        assert list(merged) == ["a", "b", "c"]

    def test_merge_of_compiled_definitions(self):
        merged = merge_definitions(compile_definition({"a": "int"}), {"b": "string"})
        compiled = compile_definition(merged)
        assert compiled["a"].type == "int"
        assert compiled["b"].type == "string"


class TestLoadDefinition:
    """YAML definition files."""

    def test_loads_sample(self):
        compiled = load_definition(SAMPLES / "order.yaml")

        assert list(compiled) == ["order_id", "status", "limit", "expedite", "coupon"]
        assert compiled["order_id"].type == "int"
        assert compiled["order_id"].is_required
        assert compiled["status"].enum == ["open", "shipped", "cancelled"]
        assert not compiled["status"].is_required
        assert compiled["limit"].lookup_sources == ("query",)
        assert compiled["coupon"].validation.check("save10") is False
        assert compiled["coupon"].validation.check("SAVE1") is False
        assert compiled["coupon"].validation.check("ABCD12") is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Definition file not found"):
            load_definition(tmp_path / "missing.yaml")

    def test_file_must_hold_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_definition(path)
