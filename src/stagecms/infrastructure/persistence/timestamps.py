"""Timestamp normalization for values read back from the database."""

from datetime import datetime, timezone


def as_utc(moment: datetime | None) -> datetime | None:
    """Attach UTC to a naive timestamp.

    SQLite drops the offset of ``DateTime(timezone=True)`` columns, so rows
    read back come out naive even though every write stores UTC.
    """
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
