"""Structured error reporting for public operations.

Public schema and item operations never raise for expected failures.
Instead they record notifications on a ``Notifications`` accumulator owned
by the caller and return ``None``. The caller decides how to translate the
collected notifications into a response.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum


class NotificationSeverity(str, Enum):
    """Who is responsible for a failure."""

    CLIENT = "client"
    SERVER = "server"


# Message returned for every server-side failure; details are only logged.
SERVER_ERROR_MESSAGE = "An unexpected error occurred while processing the request"


@dataclass(frozen=True)
class Notification:
    """A single reported failure.

    Attributes:
        code: Stable machine-readable code (e.g. 'name_taken').
        message: Human-readable message.
        severity: Client (bad input) or server (infrastructure failure).
        field: Name of the offending parameter or field slug, if any.
    """

    code: str
    message: str
    severity: NotificationSeverity
    field: str | None = None


class Notifications:
    """Mutable accumulator of notifications for one operation."""

    def __init__(self) -> None:
        self._items: list[Notification] = []

    def add(self, notification: Notification) -> None:
        self._items.append(notification)

    def add_client(self, code: str, message: str, field: str | None = None) -> None:
        """Record a client error."""
        self.add(Notification(code, message, NotificationSeverity.CLIENT, field))

    def add_server(
        self, code: str, message: str = SERVER_ERROR_MESSAGE, field: str | None = None
    ) -> None:
        """Record a server error with a client-safe message."""
        self.add(Notification(code, message, NotificationSeverity.SERVER, field))

    def extend_client(self, errors: Iterable) -> None:
        """Record every validation error (objects with field/message/code) as client errors."""
        for error in errors:
            self.add_client(error.code, error.message, error.field)

    @property
    def has_errors(self) -> bool:
        return bool(self._items)

    @property
    def has_server_errors(self) -> bool:
        return any(n.severity is NotificationSeverity.SERVER for n in self._items)

    def codes(self) -> list[str]:
        return [n.code for n in self._items]

    def for_field(self, field: str) -> list[Notification]:
        return [n for n in self._items if n.field == field]

    def __iter__(self) -> Iterator[Notification]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return self.has_errors

    def __repr__(self) -> str:
        return f"<Notifications(codes={self.codes()})>"
