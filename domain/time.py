"""
Domain time utilities (pure).

Centralized timestamp validation and stamping helpers.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

# Day stamp shown on timeline entries (e.g. 07/03/2025).
DAY_STAMP_FORMAT: str = "%d/%m/%Y"


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the requirement that stored timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_day_stamp(day: date) -> str:
    """Render a calendar day the way timeline entries carry it (dd/mm/yyyy)."""

    return day.strftime(DAY_STAMP_FORMAT)
