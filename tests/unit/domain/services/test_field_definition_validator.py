"""Tests for collection field definition validation."""

from dataclasses import dataclass
from typing import Any

import pytest

from stagecms.domain.services.field_definition_validator import FieldDefinitionValidator


@dataclass
class Definition:
    type: str | None
    name: str | None
    data: dict[str, Any] | None = None


def codes(errors):
    return [e.code for e in errors]


OPTIONS = {"options": [{"label": "Draft", "value": "draft"}]}


class TestFieldList:
    @pytest.mark.parametrize("fields", [None, []])
    def test_fields_required(self, fields):
        assert codes(FieldDefinitionValidator.validate(fields)) == ["fields_required"]

    def test_valid_schema(self):
        fields = [
            Definition("text", "Title", {"required": True, "maxLength": 100}),
            Definition("select", "Status", OPTIONS),
            Definition("range", "Score", {"min": 0, "max": 10}),
            Definition("bool", "Published"),
            Definition("color", "Accent"),
            Definition("email", "Contact", {"required": False}),
            Definition("file", "Cover", {"contentTypes": ["image/*"], "maxFileSize": 1024}),
        ]
        assert FieldDefinitionValidator.validate(fields) == []

    def test_duplicate_names(self):
        fields = [
            Definition("text", "Title", {}),
            Definition("input", "Title", {}),
        ]
        errors = FieldDefinitionValidator.validate(fields)
        assert codes(errors) == ["duplicate_field_name"]
        assert errors[0].field == "fields[1].name"

    def test_names_with_the_same_slug_are_duplicates(self):
        fields = [
            Definition("text", "First Name", {}),
            Definition("text", "first-name", {}),
        ]
        assert codes(FieldDefinitionValidator.validate(fields)) == ["duplicate_field_name"]


class TestFieldDefinition:
    def test_name_and_type_required(self):
        errors = FieldDefinitionValidator.validate_field(Definition(None, "  "), index=2)
        assert codes(errors) == ["field_name_required", "field_type_required"]
        assert [e.field for e in errors] == ["fields[2].name", "fields[2].type"]

    def test_name_without_slug_characters(self):
        errors = FieldDefinitionValidator.validate_field(Definition("text", "!!!", {}))
        assert codes(errors) == ["field_name_invalid"]

    def test_name_too_long(self):
        errors = FieldDefinitionValidator.validate_field(Definition("text", "x" * 201, {}))
        assert codes(errors) == ["field_name_too_long"]

    def test_unknown_type(self):
        errors = FieldDefinitionValidator.validate_field(Definition("date", "Published"))
        assert codes(errors) == ["field_type_invalid"]
        assert "input, text, number" in errors[0].message

    def test_type_is_case_insensitive(self):
        assert FieldDefinitionValidator.validate_field(Definition("TEXT", "Body", {})) == []

    def test_payload_required_except_bool_and_color(self):
        assert codes(FieldDefinitionValidator.validate_field(Definition("text", "Body"))) == [
            "field_data_required"
        ]
        assert FieldDefinitionValidator.validate_field(Definition("bool", "Done")) == []

    def test_malformed_payload_value(self):
        errors = FieldDefinitionValidator.validate_field(
            Definition("text", "Body", {"maxLength": "lots"})
        )
        assert codes(errors) == ["field_data_invalid"]
        assert errors[0].field == "fields[0].data.maxLength"


class TestPayloadRules:
    @pytest.mark.parametrize(
        "data, expected",
        [
            ({"minLength": -1}, ["field_min_length_invalid"]),
            ({"maxLength": 0}, ["field_max_length_invalid"]),
            ({"minLength": 10, "maxLength": 5}, ["field_length_range_invalid"]),
            ({"validation": "(unclosed"}, ["field_validation_invalid"]),
        ],
    )
    def test_length_rules(self, data, expected):
        errors = FieldDefinitionValidator.validate_field(Definition("input", "Code", data))
        assert codes(errors) == expected

    def test_number_bounds(self):
        errors = FieldDefinitionValidator.validate_field(
            Definition("number", "Qty", {"min": 5, "max": 5})
        )
        assert codes(errors) == ["field_number_range_invalid"]

    @pytest.mark.parametrize(
        "data, expected",
        [
            ({}, ["field_range_bounds_required"]),
            ({"min": 0}, ["field_range_bounds_required"]),
            ({"min": 10, "max": 1}, ["field_range_invalid"]),
        ],
    )
    def test_range_rules(self, data, expected):
        errors = FieldDefinitionValidator.validate_field(Definition("range", "Score", data))
        assert codes(errors) == expected

    def test_options_required(self):
        missing = FieldDefinitionValidator.validate_field(Definition("radio", "Size", {}))
        empty = FieldDefinitionValidator.validate_field(
            Definition("radio", "Size", {"options": []})
        )
        assert codes(missing) == codes(empty) == ["field_options_required"]

    def test_option_label_and_value_required(self):
        errors = FieldDefinitionValidator.validate_field(
            Definition("checkbox", "Tags", {"options": [{"label": " ", "value": ""}]})
        )
        assert codes(errors) == ["field_option_label_required", "field_option_value_required"]
        assert errors[0].field == "fields[0].data.options[0].label"

    def test_file_rules(self):
        errors = FieldDefinitionValidator.validate_field(
            Definition("file", "Cover", {"maxFileSize": 0})
        )
        assert codes(errors) == ["field_max_file_size_invalid", "field_content_types_required"]

    def test_file_accepts_legacy_content_type_key(self):
        errors = FieldDefinitionValidator.validate_field(
            Definition("file", "Cover", {"mimeTypes": ["application/pdf"]})
        )
        assert errors == []
