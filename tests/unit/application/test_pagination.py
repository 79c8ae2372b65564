"""Tests for page request validation."""

import pytest

from stagecms.application.services.pagination import resolve_page


def test_default_page_size(settings, notifications):
    assert resolve_page(1, None, settings, notifications) == (1, 20)
    assert not notifications


def test_explicit_page_size(settings, notifications):
    assert resolve_page(3, 100, settings, notifications) == (3, 100)


@pytest.mark.parametrize(
    "page, page_size, field",
    [(0, 10, "page"), (-1, None, "page"), (1, 0, "page_size"), (1, 101, "page_size")],
)
def test_invalid_requests(settings, notifications, page, page_size, field):
    assert resolve_page(page, page_size, settings, notifications) is None
    assert notifications.codes() == ["invalid_pagination"]
    assert len(notifications.for_field(field)) == 1
