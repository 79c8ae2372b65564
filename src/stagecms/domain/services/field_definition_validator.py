"""Validation of field definitions submitted for a collection schema.

These rules check the schema an author submits (types, names, constraint
payloads). They are distinct from the rules applied to item values, which
live in ``field_value_validator``.
"""

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from stagecms.domain.entities.field_constraints import (
    OPTIONAL_PAYLOAD_TYPES,
    FieldType,
    FileConstraints,
    InvalidConstraintError,
    LengthConstraints,
    NumberConstraints,
    OptionsConstraints,
    RangeConstraints,
    parse_constraints,
)
from stagecms.domain.services.slug_generator import SlugGenerator

MAX_NAME_LENGTH = 200
MAX_OPTION_LENGTH = 200

VALID_TYPES_MESSAGE = ", ".join(t.value for t in FieldType)


class FieldDefinitionLike(Protocol):
    """Shape of a submitted field definition."""

    type: str | None
    name: str | None
    data: Mapping[str, Any] | None


@dataclass
class FieldDefinitionError:
    """A single field definition validation error."""

    field: str
    message: str
    code: str


class FieldDefinitionValidator:
    """Validator for the field list of a collection schema."""

    @classmethod
    def validate(cls, fields: Sequence[FieldDefinitionLike] | None) -> list[FieldDefinitionError]:
        """Validate a complete field list.

        Errors are returned in discovery order; callers that fail fast use
        the first one.

        Args:
            fields: Submitted field definitions.

        Returns:
            List of validation errors. Empty list if the field list is valid.
        """
        if not fields:
            return [
                FieldDefinitionError(
                    field="fields",
                    message="At least one field is required",
                    code="fields_required",
                )
            ]

        errors: list[FieldDefinitionError] = []
        seen_names: set[str] = set()
        seen_slugs: set[str] = set()

        for index, definition in enumerate(fields):
            errors.extend(cls.validate_field(definition, index))

            name = (definition.name or "").strip()
            slug = SlugGenerator.generate(name)
            if name and (name in seen_names or (slug and slug in seen_slugs)):
                errors.append(
                    FieldDefinitionError(
                        field=f"fields[{index}].name",
                        message=f"Field name '{name}' is duplicated",
                        code="duplicate_field_name",
                    )
                )
            seen_names.add(name)
            seen_slugs.add(slug)

        return errors

    @classmethod
    def validate_field(cls, definition: FieldDefinitionLike, index: int = 0) -> list[FieldDefinitionError]:
        """Validate one field definition.

        Args:
            definition: The submitted definition.
            index: Position in the field list, used in error pointers.

        Returns:
            List of validation errors for this field.
        """
        prefix = f"fields[{index}]"
        errors: list[FieldDefinitionError] = []

        name = (definition.name or "").strip()
        if not name:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.name",
                    message="Field name is required",
                    code="field_name_required",
                )
            )
        elif len(name) > MAX_NAME_LENGTH:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.name",
                    message=f"Field name must be at most {MAX_NAME_LENGTH} characters",
                    code="field_name_too_long",
                )
            )
        elif not SlugGenerator.generate(name):
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.name",
                    message="Field name must contain at least one letter or digit",
                    code="field_name_invalid",
                )
            )

        if not definition.type:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.type",
                    message="Field type is required",
                    code="field_type_required",
                )
            )
            return errors

        field_type = FieldType.parse(definition.type)
        if field_type is None:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.type",
                    message=f"Invalid field type '{definition.type}'. Valid types: {VALID_TYPES_MESSAGE}",
                    code="field_type_invalid",
                )
            )
            return errors

        if definition.data is None and field_type not in OPTIONAL_PAYLOAD_TYPES:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.data",
                    message=f"Constraint data is required for '{field_type.value}' fields",
                    code="field_data_required",
                )
            )
            return errors

        try:
            constraints = parse_constraints(field_type, definition.data)
        except InvalidConstraintError as e:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.data.{e.key}",
                    message=e.message,
                    code="field_data_invalid",
                )
            )
            return errors

        payload_rules = cls._payload_rules().get(field_type)
        if payload_rules is not None:
            errors.extend(payload_rules(constraints, prefix))

        return errors

    @classmethod
    def _payload_rules(cls) -> dict[FieldType, Callable[[Any, str], list[FieldDefinitionError]]]:
        """Payload rules keyed by field type; email, bool and color have none."""
        return {
            FieldType.INPUT: cls._validate_length,
            FieldType.TEXT: cls._validate_length,
            FieldType.NUMBER: cls._validate_number,
            FieldType.SELECT: cls._validate_options,
            FieldType.RADIO: cls._validate_options,
            FieldType.CHECKBOX: cls._validate_options,
            FieldType.RANGE: cls._validate_range,
            FieldType.FILE: cls._validate_file,
        }

    @classmethod
    def _validate_length(cls, constraints: LengthConstraints, prefix: str) -> list[FieldDefinitionError]:
        errors: list[FieldDefinitionError] = []

        if constraints.min_length is not None and constraints.min_length < 0:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.data.minLength",
                    message="minLength must be greater than or equal to 0",
                    code="field_min_length_invalid",
                )
            )
        if constraints.max_length is not None and constraints.max_length <= 0:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.data.maxLength",
                    message="maxLength must be greater than 0",
                    code="field_max_length_invalid",
                )
            )
        if (
            constraints.min_length is not None
            and constraints.max_length is not None
            and constraints.max_length < constraints.min_length
        ):
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.data.maxLength",
                    message="maxLength must be greater than or equal to minLength",
                    code="field_length_range_invalid",
                )
            )
        if constraints.validation is not None:
            try:
                re.compile(constraints.validation)
            except re.error as e:
                errors.append(
                    FieldDefinitionError(
                        field=f"{prefix}.data.validation",
                        message=f"Invalid validation pattern: {e}",
                        code="field_validation_invalid",
                    )
                )

        return errors

    @classmethod
    def _validate_number(cls, constraints: NumberConstraints, prefix: str) -> list[FieldDefinitionError]:
        if constraints.min is not None and constraints.max is not None and constraints.min >= constraints.max:
            return [
                FieldDefinitionError(
                    field=f"{prefix}.data.min",
                    message="min must be less than max",
                    code="field_number_range_invalid",
                )
            ]
        return []

    @classmethod
    def _validate_options(cls, constraints: OptionsConstraints, prefix: str) -> list[FieldDefinitionError]:
        if constraints.options is None:
            return [
                FieldDefinitionError(
                    field=f"{prefix}.data.options",
                    message="Options are required",
                    code="field_options_required",
                )
            ]
        if not constraints.options:
            return [
                FieldDefinitionError(
                    field=f"{prefix}.data.options",
                    message="At least one option is required",
                    code="field_options_required",
                )
            ]

        errors: list[FieldDefinitionError] = []
        for i, option in enumerate(constraints.options):
            pointer = f"{prefix}.data.options[{i}]"
            if not option.label.strip():
                errors.append(
                    FieldDefinitionError(
                        field=f"{pointer}.label",
                        message="Option label is required",
                        code="field_option_label_required",
                    )
                )
            elif len(option.label) > MAX_OPTION_LENGTH:
                errors.append(
                    FieldDefinitionError(
                        field=f"{pointer}.label",
                        message=f"Option label must be at most {MAX_OPTION_LENGTH} characters",
                        code="field_option_label_too_long",
                    )
                )
            if not option.value.strip():
                errors.append(
                    FieldDefinitionError(
                        field=f"{pointer}.value",
                        message="Option value is required",
                        code="field_option_value_required",
                    )
                )
            elif len(option.value) > MAX_OPTION_LENGTH:
                errors.append(
                    FieldDefinitionError(
                        field=f"{pointer}.value",
                        message=f"Option value must be at most {MAX_OPTION_LENGTH} characters",
                        code="field_option_value_too_long",
                    )
                )
        return errors

    @classmethod
    def _validate_range(cls, constraints: RangeConstraints, prefix: str) -> list[FieldDefinitionError]:
        if constraints.min is None or constraints.max is None:
            return [
                FieldDefinitionError(
                    field=f"{prefix}.data",
                    message="Range fields require both min and max",
                    code="field_range_bounds_required",
                )
            ]
        if constraints.max <= constraints.min:
            return [
                FieldDefinitionError(
                    field=f"{prefix}.data.max",
                    message="max must be greater than min",
                    code="field_range_invalid",
                )
            ]
        return []

    @classmethod
    def _validate_file(cls, constraints: FileConstraints, prefix: str) -> list[FieldDefinitionError]:
        errors: list[FieldDefinitionError] = []
        if constraints.max_file_size is not None and constraints.max_file_size <= 0:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.data.maxFileSize",
                    message="maxFileSize must be greater than 0",
                    code="field_max_file_size_invalid",
                )
            )
        if constraints.content_types is None:
            errors.append(
                FieldDefinitionError(
                    field=f"{prefix}.data.contentTypes",
                    message="The list of allowed content types is required",
                    code="field_content_types_required",
                )
            )
        return errors
