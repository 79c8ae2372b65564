"""Field types and their type-specific constraint payloads.

Every collection field carries exactly one constraint payload, selected by
its ``FieldType``. Payloads are immutable dataclasses serialized with the
camelCase keys clients send (``minLength``, ``allowDecimals``...), so the
stored schema and the submitted schema share one shape.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any


class FieldType(str, Enum):
    """Supported field types for collection schemas."""

    INPUT = "input"
    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    SELECT = "select"
    RADIO = "radio"
    BOOL = "bool"
    CHECKBOX = "checkbox"
    FILE = "file"
    RANGE = "range"
    COLOR = "color"

    @classmethod
    def parse(cls, value: str | None) -> "FieldType | None":
        """Look up a field type case-insensitively, returning None if unknown."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class InvalidConstraintError(ValueError):
    """Raised when a constraint payload value cannot be parsed."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key
        self.message = message


def parse_decimal(value: Any) -> Decimal | None:
    """Parse a numeric value into a finite Decimal.

    Accepts ints, floats, Decimals and numeric strings. Booleans are not
    numbers here. Floats go through their shortest repr so that ``-0.001``
    stays exactly ``-0.001``.

    Returns:
        The parsed Decimal, or None if the value is not numeric.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(repr(value))
    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    return None


def _decimal_to_json(value: Decimal | None) -> int | float | None:
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _get_bool(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidConstraintError(key, f"'{key}' must be a boolean")


def _get_int(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    parsed = parse_decimal(value)
    if parsed is None or parsed != parsed.to_integral_value():
        raise InvalidConstraintError(key, f"'{key}' must be an integer")
    return int(parsed)


def _get_decimal(data: Mapping[str, Any], key: str) -> Decimal | None:
    value = data.get(key)
    if value is None:
        return None
    parsed = parse_decimal(value)
    if parsed is None:
        raise InvalidConstraintError(key, f"'{key}' must be a number")
    return parsed


def _get_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidConstraintError(key, f"'{key}' must be a string")
    return value


@dataclass(frozen=True)
class FieldOption:
    """One selectable option of a select, radio or checkbox field."""

    label: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class FieldConstraints:
    """Base payload shared by every field type."""

    required: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldConstraints":
        return cls(required=_get_bool(data, "required"))

    def to_dict(self) -> dict[str, Any]:
        return {"required": self.required}


@dataclass(frozen=True)
class LengthConstraints(FieldConstraints):
    """Shared payload of input and text fields."""

    min_length: int | None = None
    max_length: int | None = None
    validation: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LengthConstraints":
        return cls(
            required=_get_bool(data, "required"),
            min_length=_get_int(data, "minLength"),
            max_length=_get_int(data, "maxLength"),
            validation=_get_str(data, "validation"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "validation": self.validation,
            "required": self.required,
        }


@dataclass(frozen=True)
class InputConstraints(LengthConstraints):
    pass


@dataclass(frozen=True)
class TextConstraints(LengthConstraints):
    pass


@dataclass(frozen=True)
class NumberConstraints(FieldConstraints):
    min: Decimal | None = None
    max: Decimal | None = None
    allow_decimals: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NumberConstraints":
        return cls(
            required=_get_bool(data, "required"),
            min=_get_decimal(data, "min"),
            max=_get_decimal(data, "max"),
            allow_decimals=_get_bool(data, "allowDecimals"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": _decimal_to_json(self.min),
            "max": _decimal_to_json(self.max),
            "required": self.required,
            "allowDecimals": self.allow_decimals,
        }


@dataclass(frozen=True)
class EmailConstraints(FieldConstraints):
    pass


@dataclass(frozen=True)
class BoolConstraints(FieldConstraints):
    pass


@dataclass(frozen=True)
class ColorConstraints(FieldConstraints):
    pass


@dataclass(frozen=True)
class OptionsConstraints(FieldConstraints):
    """Shared payload of select, radio and checkbox fields.

    ``options`` is None when the payload omitted the list entirely, which
    is reported differently from an empty list.
    """

    options: tuple[FieldOption, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OptionsConstraints":
        raw_options = data.get("options")
        options: tuple[FieldOption, ...] | None = None
        if raw_options is not None:
            if not isinstance(raw_options, (list, tuple)):
                raise InvalidConstraintError("options", "'options' must be a list")
            parsed = []
            for raw in raw_options:
                if not isinstance(raw, Mapping):
                    raise InvalidConstraintError(
                        "options", "Each option must be an object with 'label' and 'value'"
                    )
                label = raw.get("label")
                value = raw.get("value")
                parsed.append(
                    FieldOption(
                        label="" if label is None else str(label),
                        value="" if value is None else str(value),
                    )
                )
            options = tuple(parsed)
        return cls(required=_get_bool(data, "required"), options=options)

    @property
    def values(self) -> list[str]:
        return [option.value for option in self.options or ()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "options": [option.to_dict() for option in self.options or ()],
            "required": self.required,
        }


@dataclass(frozen=True)
class SelectConstraints(OptionsConstraints):
    pass


@dataclass(frozen=True)
class RadioConstraints(OptionsConstraints):
    pass


@dataclass(frozen=True)
class CheckboxConstraints(OptionsConstraints):
    pass


@dataclass(frozen=True)
class RangeConstraints(FieldConstraints):
    min: Decimal | None = None
    max: Decimal | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RangeConstraints":
        return cls(
            required=_get_bool(data, "required"),
            min=_get_decimal(data, "min"),
            max=_get_decimal(data, "max"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": _decimal_to_json(self.min),
            "max": _decimal_to_json(self.max),
            "required": self.required,
        }


# Accepted spellings of the content-type list, newest first
CONTENT_TYPE_KEYS = ("contentTypes", "mimeTypes", "miniTypes")


@dataclass(frozen=True)
class FileConstraints(FieldConstraints):
    max_file_size: int | None = None
    content_types: tuple[str, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FileConstraints":
        content_types: tuple[str, ...] | None = None
        for key in CONTENT_TYPE_KEYS:
            raw = data.get(key)
            if raw is None:
                continue
            if not isinstance(raw, (list, tuple)) or not all(isinstance(t, str) for t in raw):
                raise InvalidConstraintError(key, f"'{key}' must be a list of strings")
            content_types = tuple(raw)
            break
        return cls(
            required=_get_bool(data, "required"),
            max_file_size=_get_int(data, "maxFileSize"),
            content_types=content_types,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "maxFileSize": self.max_file_size,
            "contentTypes": list(self.content_types) if self.content_types is not None else None,
            "required": self.required,
        }


CONSTRAINT_TYPES: dict[FieldType, type[FieldConstraints]] = {
    FieldType.INPUT: InputConstraints,
    FieldType.TEXT: TextConstraints,
    FieldType.NUMBER: NumberConstraints,
    FieldType.EMAIL: EmailConstraints,
    FieldType.SELECT: SelectConstraints,
    FieldType.RADIO: RadioConstraints,
    FieldType.BOOL: BoolConstraints,
    FieldType.CHECKBOX: CheckboxConstraints,
    FieldType.FILE: FileConstraints,
    FieldType.RANGE: RangeConstraints,
    FieldType.COLOR: ColorConstraints,
}

# Types whose payload may be omitted (defaults to not required)
OPTIONAL_PAYLOAD_TYPES = frozenset({FieldType.BOOL, FieldType.COLOR})


def parse_constraints(field_type: FieldType, data: Mapping[str, Any] | None) -> FieldConstraints:
    """Build the constraint payload for a field type.

    Args:
        field_type: The field's declared type.
        data: Raw camelCase payload, or None when omitted.

    Returns:
        The payload instance matching ``field_type``.

    Raises:
        InvalidConstraintError: If a payload value has the wrong shape.
    """
    constraint_cls = CONSTRAINT_TYPES[field_type]
    return constraint_cls.from_dict(data or {})
