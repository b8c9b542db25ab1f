"""
Domain: lead description timeline (pure).

Append rule:
- A skipped entry is always accepted and carries SKIPPED_TEXT as its text.
- A regular entry is accepted only when its text is non-blank after trimming.

Entries are stamped with the day they are added and never change afterwards.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Tuple

from .lead import DescriptionEntry
from .time import format_day_stamp

SKIPPED_TEXT: str = "[דילגתי]"


def can_add_entry(text: str, skipped: bool) -> bool:
    return skipped or bool(text.strip())


def new_entry(text: str, skipped: bool, today: Optional[date] = None) -> DescriptionEntry:
    """
    Build a timeline entry stamped with `today` (local date when omitted).

    Raises:
    - ValueError if the entry is neither skipped nor has non-blank text.
    """

    if not can_add_entry(text, skipped):
        raise ValueError("Timeline entry text must not be blank unless the day is skipped")

    day = today if today is not None else date.today()
    return DescriptionEntry(
        date=format_day_stamp(day),
        text=SKIPPED_TEXT if skipped else text,
        skipped=skipped,
    )


def append_entry(
    entries: Tuple[DescriptionEntry, ...], entry: DescriptionEntry
) -> Tuple[DescriptionEntry, ...]:
    """Return a new timeline with `entry` last; `entries` is left untouched."""

    return tuple(entries) + (entry,)
