"""Validation of item values against collection field definitions.

Validates one submitted value at a time against the rules implied by its
field's type and constraint payload. ``validate_item`` runs every field of
a collection and collects all errors instead of stopping at the first.
"""

import re
import string
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from stagecms.domain.entities.collection import CollectionField
from stagecms.domain.entities.field_constraints import FieldType, parse_decimal
from stagecms.domain.services.document_values import unwrap_envelope

# Marker for a field that is absent from the submitted data
MISSING: Any = object()

# Email validation pattern (simplified but effective)
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

HEX_DIGITS = frozenset(string.hexdigits)


@dataclass
class FieldValueError:
    """A single item value validation error.

    Attributes:
        field: Slug of the offending field.
        message: Human-readable error message naming the field.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


def _format_decimal(value: Decimal) -> str:
    return f"{Decimal(value).normalize():f}"


def _is_blank(value: Any) -> bool:
    if value is MISSING or value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return isinstance(value, (list, tuple)) and not value


class FieldValueValidator:
    """Validator for item values against collection field definitions."""

    @classmethod
    def validate(cls, field: CollectionField, value: Any = MISSING) -> list[FieldValueError]:
        """Validate one submitted value.

        A required field with an absent, null or blank value yields exactly
        one error and no other rule is evaluated. A blank value on an
        optional field is accepted without further checks.

        Args:
            field: The field definition.
            value: The submitted value, or ``MISSING`` when absent.

        Returns:
            List of validation errors. Empty list if the value is valid.
        """
        if value is not MISSING:
            value = unwrap_envelope(value)

        if _is_blank(value):
            if field.required:
                return [
                    FieldValueError(
                        field=field.slug,
                        message=f"'{field.name}' is required",
                        code="required",
                    )
                ]
            return []

        type_rules = cls._type_rules().get(field.type)
        if type_rules is None:
            return []
        return type_rules(field, value)

    @classmethod
    def validate_item(
        cls, fields: Sequence[CollectionField], data: Mapping[str, Any]
    ) -> list[FieldValueError]:
        """Validate submitted item data against every field of a collection.

        Keys that do not match a field slug are ignored.

        Args:
            fields: The collection's field definitions.
            data: Submitted map of field slug to value.

        Returns:
            All validation errors across all fields.
        """
        errors: list[FieldValueError] = []
        for field in fields:
            errors.extend(cls.validate(field, data.get(field.slug, MISSING)))
        return errors

    @classmethod
    def _type_rules(cls) -> dict[FieldType, Callable[[CollectionField, Any], list[FieldValueError]]]:
        """Value rules keyed by field type; bool and file values are not checked here."""
        return {
            FieldType.INPUT: cls._validate_text,
            FieldType.TEXT: cls._validate_text,
            FieldType.NUMBER: cls._validate_number,
            FieldType.EMAIL: cls._validate_email,
            FieldType.SELECT: cls._validate_choices,
            FieldType.CHECKBOX: cls._validate_choices,
            FieldType.RADIO: cls._validate_radio,
            FieldType.RANGE: cls._validate_range,
            FieldType.COLOR: cls._validate_color,
        }

    @classmethod
    def _validate_text(cls, field: CollectionField, value: Any) -> list[FieldValueError]:
        constraints = field.constraints
        text = value if isinstance(value, str) else str(value)
        errors: list[FieldValueError] = []

        if constraints.min_length is not None and len(text) < constraints.min_length:
            errors.append(
                FieldValueError(
                    field=field.slug,
                    message=f"'{field.name}' must be at least {constraints.min_length} characters",
                    code="min_length",
                )
            )
        if constraints.max_length is not None and len(text) > constraints.max_length:
            errors.append(
                FieldValueError(
                    field=field.slug,
                    message=f"'{field.name}' must be at most {constraints.max_length} characters",
                    code="max_length",
                )
            )

        if constraints.validation:
            try:
                matched = re.search(constraints.validation, text) is not None
            except re.error:
                errors.append(
                    FieldValueError(
                        field=field.slug,
                        message=f"'{field.name}' has an invalid validation pattern",
                        code="invalid_pattern",
                    )
                )
            else:
                if not matched:
                    errors.append(
                        FieldValueError(
                            field=field.slug,
                            message=f"'{field.name}' does not match the required format",
                            code="pattern_mismatch",
                        )
                    )

        return errors

    @classmethod
    def _invalid_option(cls, field: CollectionField, value: Any, allowed: list[str]) -> FieldValueError:
        return FieldValueError(
            field=field.slug,
            message=(
                f"'{field.name}': '{value}' is not a valid option. "
                f"Allowed values: {', '.join(allowed)}"
            ),
            code="invalid_option",
        )

    @classmethod
    def _validate_choices(cls, field: CollectionField, value: Any) -> list[FieldValueError]:
        allowed = field.constraints.values
        candidates = value if isinstance(value, (list, tuple)) else [value]
        return [
            cls._invalid_option(field, candidate, allowed)
            for candidate in candidates
            if str(candidate) not in allowed
        ]

    @classmethod
    def _validate_radio(cls, field: CollectionField, value: Any) -> list[FieldValueError]:
        allowed = field.constraints.values
        if isinstance(value, (list, tuple, Mapping)):
            return [
                FieldValueError(
                    field=field.slug,
                    message=f"'{field.name}' accepts a single option",
                    code="invalid_option",
                )
            ]
        if str(value) not in allowed:
            return [cls._invalid_option(field, value, allowed)]
        return []

    @classmethod
    def _not_numeric(cls, field: CollectionField) -> FieldValueError:
        return FieldValueError(
            field=field.slug,
            message=f"'{field.name}' must be a number",
            code="not_numeric",
        )

    @classmethod
    def _validate_range(cls, field: CollectionField, value: Any) -> list[FieldValueError]:
        number = parse_decimal(value)
        if number is None:
            return [cls._not_numeric(field)]

        minimum, maximum = field.constraints.min, field.constraints.max
        if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
            return [
                FieldValueError(
                    field=field.slug,
                    message=(
                        f"'{field.name}' must be between "
                        f"{_format_decimal(minimum) if minimum is not None else '-inf'} and "
                        f"{_format_decimal(maximum) if maximum is not None else 'inf'}"
                    ),
                    code="out_of_range",
                )
            ]
        return []

    @classmethod
    def _validate_number(cls, field: CollectionField, value: Any) -> list[FieldValueError]:
        number = parse_decimal(value)
        if number is None:
            return [cls._not_numeric(field)]

        constraints = field.constraints
        errors: list[FieldValueError] = []
        if not constraints.allow_decimals and number != number.to_integral_value():
            errors.append(
                FieldValueError(
                    field=field.slug,
                    message=f"'{field.name}' must be a whole number",
                    code="decimals_not_allowed",
                )
            )
        if constraints.min is not None and number < constraints.min:
            errors.append(
                FieldValueError(
                    field=field.slug,
                    message=f"'{field.name}' must be at least {_format_decimal(constraints.min)}",
                    code="out_of_range",
                )
            )
        if constraints.max is not None and number > constraints.max:
            errors.append(
                FieldValueError(
                    field=field.slug,
                    message=f"'{field.name}' must be at most {_format_decimal(constraints.max)}",
                    code="out_of_range",
                )
            )
        return errors

    @classmethod
    def _validate_email(cls, field: CollectionField, value: Any) -> list[FieldValueError]:
        if not isinstance(value, str) or not EMAIL_PATTERN.match(value.strip()):
            return [
                FieldValueError(
                    field=field.slug,
                    message=f"'{field.name}' must be a valid email address",
                    code="invalid_email",
                )
            ]
        return []

    @classmethod
    def _validate_color(cls, field: CollectionField, value: Any) -> list[FieldValueError]:
        hex_value = str(value).strip()
        if hex_value.startswith("#"):
            hex_value = hex_value[1:]
        if len(hex_value) in (3, 6) and all(c in HEX_DIGITS for c in hex_value):
            return []
        return [
            FieldValueError(
                field=field.slug,
                message=f"'{field.name}' must be a valid hex color (e.g. #FFF or #FFFFFF)",
                code="invalid_color",
            )
        ]
