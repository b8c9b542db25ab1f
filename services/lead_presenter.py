"""
Presentation helpers for lead cards.

Maps the closed domain enums to display keys. The mappings are exhaustive:
every enum member has an entry, so rendering never falls through.
"""

from __future__ import annotations

from typing import Mapping

from domain.lead import Lead, Source, Status

UNNAMED_LEAD = "ללא שם"
NOTES_PREVIEW_LENGTH = 50

STATUS_STYLES: Mapping[Status, str] = {
    Status.NEW: "status-new",
    Status.INITIAL_RESPONSE: "status-initial",
    Status.FOLLOW_UP: "status-followup",
    Status.CLOSED: "status-closed",
}

SOURCE_ICONS: Mapping[Source, str] = {
    Source.INSTAGRAM: "instagram",
    Source.TIKTOK: "tiktok",
    Source.FACEBOOK: "facebook",
    Source.EMAIL: "email",
    Source.PHONE: "phone",
}


def display_name(lead: Lead) -> str:
    return lead.full_name or UNNAMED_LEAD


def notes_preview(notes: str, limit: int = NOTES_PREVIEW_LENGTH) -> str:
    """First `limit` characters of the notes, with an ellipsis when cut."""

    if len(notes) <= limit:
        return notes
    return notes[:limit] + "..."


def status_style(status: Status) -> str:
    return STATUS_STYLES[status]


def source_icon(source: Source) -> str:
    return SOURCE_ICONS[source]
