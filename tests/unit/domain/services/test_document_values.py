"""Tests for envelope unwrapping and stored value conversion."""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID

from stagecms.domain.services.document_values import to_document_value, unwrap_envelope


class Status(Enum):
    DRAFT = "draft"


def test_unwrap_prefers_value_over_options():
    assert unwrap_envelope({"value": "a", "options": ["b"]}) == "a"
    assert unwrap_envelope({"valor": 3}) == 3
    assert unwrap_envelope({"opcoes": ["x", "y"]}) == ["x", "y"]


def test_unwrap_leaves_other_values_alone():
    reference = {"fileNameUrl": "abc.png"}
    assert unwrap_envelope(reference) is reference
    assert unwrap_envelope(["a"]) == ["a"]
    assert unwrap_envelope(None) is None


def test_to_document_value_recurses():
    value = {
        "count": Decimal("3"),
        "ratio": Decimal("0.25"),
        "when": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        "day": date(2024, 5, 1),
        "tags": ("a", "b"),
        "nested": [{"status": Status.DRAFT}],
        "ref": UUID("12345678-1234-5678-1234-567812345678"),
        1: True,
    }

    assert to_document_value(value) == {
        "count": 3,
        "ratio": 0.25,
        "when": "2024-05-01T12:00:00+00:00",
        "day": "2024-05-01",
        "tags": ["a", "b"],
        "nested": [{"status": "draft"}],
        "ref": "12345678-1234-5678-1234-567812345678",
        "1": True,
    }


def test_to_document_value_primitives_pass_through():
    for value in (None, True, 7, 1.5, "text"):
        assert to_document_value(value) == value
