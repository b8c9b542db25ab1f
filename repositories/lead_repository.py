"""
Lead repository (persistence).

This module provides *only* persistence operations for the Lead domain entity.
No business rules (timestamps policy, filtering, timeline append rule) belong here;
callers pass the timestamps they want written.

Every function accepts an optional `client` so callers and tests can supply
their own Supabase client; the shared one from `repositories.client` is used
otherwise.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from supabase import Client

from domain.lead import DescriptionEntry, InquiryType, Lead, LeadDraft, Source, Status
from repositories.client import LEADS_TABLE, get_supabase

logger = logging.getLogger(__name__)

# Ordering of every full-list read: newest lead first.
_ORDER_COLUMN: str = "created_at"


class LeadStoreError(RuntimeError):
    """Raised when the remote store rejects or fails a lead operation."""


class LeadNotFoundError(LeadStoreError):
    """Raised when an update targets a lead id that no longer exists."""


def _to_iso_utc(dt: datetime) -> str:
    """Convert a timezone-aware datetime to an ISO-8601 string in UTC."""

    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("timestamps must be timezone-aware (UTC)")
    return dt.astimezone(timezone.utc).isoformat()


def _parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.replace("Z", "+00:00")
        dt = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    # Naive timestamps are interpreted as UTC.
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def _draft_to_row(draft: LeadDraft) -> dict[str, Any]:
    """Convert the editable part of a lead to a Supabase row payload."""

    return {
        "full_name": draft.full_name,
        "event_date": draft.event_date,
        "source": draft.source.value,
        "status": draft.status.value,
        "inquiry_type": draft.inquiry_type.value,
        "closed": draft.closed,
        "advance_payment": draft.advance_payment,
        "additional_details": draft.additional_details,
        "important_notes": draft.important_notes,
        "descriptions": [
            {"date": entry.date, "text": entry.text, "skipped": entry.skipped}
            for entry in draft.descriptions
        ],
    }


def _row_to_lead(row: Mapping[str, Any]) -> Lead:
    """
    Convert a Supabase row into a domain Lead.

    Raises ValueError/KeyError/TypeError/AttributeError for rows that do not fit the model
    (e.g. an enumerated column holding a value outside its closed set).
    """

    descriptions = tuple(
        DescriptionEntry(
            date=str(item.get("date", "")),
            text=str(item.get("text", "")),
            skipped=bool(item.get("skipped", False)),
        )
        for item in (row.get("descriptions") or [])
    )

    return Lead(
        id=str(row["id"]),
        full_name=row.get("full_name") or "",
        event_date=row.get("event_date") or "",
        source=Source(row["source"]),
        status=Status(row["status"]),
        inquiry_type=InquiryType(row["inquiry_type"]),
        closed=bool(row.get("closed", False)),
        advance_payment=bool(row.get("advance_payment", False)),
        additional_details=row.get("additional_details") or "",
        important_notes=row.get("important_notes") or "",
        descriptions=descriptions,
        created_at=_parse_utc_datetime(row["created_at"]),
        updated_at=_parse_utc_datetime(row["updated_at"]),
    )


def _execute(query: Any, action: str) -> List[Mapping[str, Any]]:
    """Run a query builder and return its rows, wrapping every failure in LeadStoreError."""

    try:
        response = query.execute()
    except Exception as exc:
        raise LeadStoreError(f"Failed to {action}: {exc}") from exc

    error = getattr(response, "error", None)
    if error:
        raise LeadStoreError(f"Failed to {action}: {error}")

    return getattr(response, "data", None) or []


def insert_lead(
    draft: LeadDraft,
    created_at: datetime,
    updated_at: datetime,
    client: Optional[Client] = None,
) -> str:
    """
    Insert a new lead and return the id the store assigned to it.

    Raises:
    - LeadStoreError if Supabase fails or returns an error response.
    - ValueError for non timezone-aware timestamps.
    """

    db = client or get_supabase()
    payload = _draft_to_row(draft)
    payload["created_at"] = _to_iso_utc(created_at)
    payload["updated_at"] = _to_iso_utc(updated_at)

    rows = _execute(db.table(LEADS_TABLE).insert(payload), "insert lead")
    if not rows:
        raise LeadStoreError("Failed to insert lead: store returned no row")

    lead_id = str(rows[0]["id"])
    logger.info("Inserted lead %s", lead_id)
    return lead_id


def update_lead(
    lead_id: str,
    draft: LeadDraft,
    updated_at: datetime,
    client: Optional[Client] = None,
) -> None:
    """
    Overwrite the editable fields of a lead and refresh updated_at.

    created_at is never part of the payload.

    Raises:
    - LeadNotFoundError if no lead has this id.
    - LeadStoreError if Supabase fails or returns an error response.
    """

    db = client or get_supabase()
    payload = _draft_to_row(draft)
    payload["updated_at"] = _to_iso_utc(updated_at)

    rows = _execute(
        db.table(LEADS_TABLE).update(payload).eq("id", lead_id),
        "update lead",
    )
    if not rows:
        raise LeadNotFoundError(f"Lead not found: {lead_id}")
    logger.info("Updated lead %s", lead_id)


def delete_lead(lead_id: str, client: Optional[Client] = None) -> None:
    """
    Delete a lead by id.

    Deleting an id that is already gone is not an error.
    """

    db = client or get_supabase()
    _execute(db.table(LEADS_TABLE).delete().eq("id", lead_id), "delete lead")
    logger.info("Deleted lead %s", lead_id)


def get_lead_by_id(lead_id: str, client: Optional[Client] = None) -> Lead | None:
    """
    Fetch a Lead by ID.

    Returns:
    - Lead if found
    - None if no record exists for the given ID
    """

    db = client or get_supabase()
    rows = _execute(
        db.table(LEADS_TABLE).select("*").eq("id", lead_id).limit(1),
        "fetch lead",
    )
    if not rows:
        return None

    try:
        return _row_to_lead(rows[0])
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise LeadStoreError(f"Malformed lead row {lead_id}: {exc}") from exc


def list_leads(client: Optional[Client] = None) -> List[Lead]:
    """
    List every lead, newest first (created_at descending).

    Rows that do not fit the domain model are skipped with a warning so a single
    bad document never hides the rest of the list.
    """

    db = client or get_supabase()
    rows = _execute(
        db.table(LEADS_TABLE).select("*").order(_ORDER_COLUMN, desc=True),
        "list leads",
    )

    leads: List[Lead] = []
    for row in rows:
        try:
            leads.append(_row_to_lead(row))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "Skipping malformed lead row %s: %s", row.get("id"), exc
            )
    return leads


__all__ = [
    "LeadStoreError",
    "LeadNotFoundError",
    "insert_lead",
    "update_lead",
    "delete_lead",
    "get_lead_by_id",
    "list_leads",
]
