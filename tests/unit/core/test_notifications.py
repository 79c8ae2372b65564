"""Tests for the notification accumulator."""

from dataclasses import dataclass

from stagecms.core.notifications import (
    SERVER_ERROR_MESSAGE,
    Notification,
    NotificationSeverity,
    Notifications,
)


@dataclass
class _Error:
    field: str
    message: str
    code: str


def test_empty_accumulator_is_falsy():
    notifications = Notifications()
    assert not notifications
    assert notifications.has_errors is False
    assert len(notifications) == 0
    assert notifications.codes() == []


def test_add_client_records_field_pointer():
    notifications = Notifications()
    notifications.add_client("name_taken", "Name already used", "name")

    assert notifications.has_errors is True
    assert notifications.has_server_errors is False
    assert list(notifications) == [
        Notification("name_taken", "Name already used", NotificationSeverity.CLIENT, "name")
    ]


def test_add_server_uses_generic_message():
    notifications = Notifications()
    notifications.add_server("item_persist_failed")

    (notification,) = list(notifications)
    assert notification.severity is NotificationSeverity.SERVER
    assert notification.message == SERVER_ERROR_MESSAGE
    assert notifications.has_server_errors is True


def test_extend_client_keeps_every_error_in_order():
    notifications = Notifications()
    notifications.extend_client(
        [
            _Error("title", "'Title' is required", "required"),
            _Error("email", "'Email' must be a valid email address", "invalid_email"),
        ]
    )

    assert notifications.codes() == ["required", "invalid_email"]
    assert [n.code for n in notifications.for_field("email")] == ["invalid_email"]
    assert all(n.severity is NotificationSeverity.CLIENT for n in notifications)
