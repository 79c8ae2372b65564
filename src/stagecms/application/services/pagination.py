"""Validation of pagination parameters shared by listing operations."""

from stagecms.core.config import Settings
from stagecms.core.notifications import Notifications


def resolve_page(
    page: int,
    page_size: int | None,
    settings: Settings,
    notifications: Notifications,
) -> tuple[int, int] | None:
    """Validate a page request and fill in the default page size.

    Args:
        page: Requested 1-based page number.
        page_size: Requested page size, or None for the configured default.
        settings: Application settings.
        notifications: Accumulator receiving an ``invalid_pagination`` error.

    Returns:
        Tuple of (page, page_size), or None if the request is invalid.
    """
    size = settings.default_page_size if page_size is None else page_size

    if page < 1:
        notifications.add_client("invalid_pagination", "Page must be greater than 0", "page")
        return None
    if size < 1 or size > settings.max_page_size:
        notifications.add_client(
            "invalid_pagination",
            f"Page size must be between 1 and {settings.max_page_size}",
            "page_size",
        )
        return None
    return page, size
