"""Conversion of submitted item values into stored document values.

Clients sometimes send a field value wrapped in an envelope object, for
example ``{"value": "red", "label": "Red"}`` for a select or
``{"options": ["a", "b"]}`` for a checkbox. The envelope shape is fixed:
the wrapped value lives under ``value`` (or the legacy ``valor``), or else
under ``options`` (or the legacy ``opcoes``). Anything else is taken as is.
"""

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

VALUE_ENVELOPE_KEYS = ("value", "valor")
OPTIONS_ENVELOPE_KEYS = ("options", "opcoes")


def unwrap_envelope(value: Any) -> Any:
    """Return the value carried by an envelope, or the value itself.

    Args:
        value: A submitted field value.

    Returns:
        The nested value if ``value`` is an envelope, otherwise ``value``.

    Examples:
        >>> unwrap_envelope({"value": "red", "label": "Red"})
        'red'
        >>> unwrap_envelope({"opcoes": ["a"]})
        ['a']
        >>> unwrap_envelope("plain")
        'plain'
    """
    if not isinstance(value, Mapping):
        return value
    for key in VALUE_ENVELOPE_KEYS:
        if key in value:
            return value[key]
    for key in OPTIONS_ENVELOPE_KEYS:
        if key in value:
            return value[key]
    return value


def to_document_value(value: Any) -> Any:
    """Convert a value into its JSON-native stored representation.

    Nested mappings and sequences are converted recursively. Decimals become
    ints when integral and floats otherwise, dates and datetimes become ISO
    strings, and unknown objects fall back to ``str``.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        if value.is_finite() and value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, Enum):
        return to_document_value(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Mapping):
        return {str(k): to_document_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_document_value(v) for v in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
