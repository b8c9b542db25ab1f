"""
Domain: Lead entity.

A Lead is a prospective-client inquiry tracked through a simple sales
pipeline (new -> initial response -> follow-up -> closed).

Rules implemented here:
- Enumerated fields (source, status, inquiry type) are closed sets.
- `closed` and `advance_payment` are independent of `status`; no cross-field
  invariant is enforced and any status may follow any other.
- The description timeline is an ordered, append-only tuple of entries with no
  identity of their own.
- created_at and updated_at are UTC timestamps set by the application.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Tuple

from .time import require_utc_timestamp


class Source(str, Enum):
    """Inbound channel the inquiry arrived through."""

    INSTAGRAM = "אינסטגרם"
    TIKTOK = "טיקטוק"
    FACEBOOK = "פייסבוק"
    EMAIL = "אימייל"
    PHONE = "טלפון"


class Status(str, Enum):
    """Pipeline stage. Not a strict state machine."""

    NEW = "חדש"
    INITIAL_RESPONSE = "מענה ראשוני"
    FOLLOW_UP = "פולואפ"
    CLOSED = "נסגר"


class InquiryType(str, Enum):
    """Service category the client asked about."""

    EVENING_MAKEUP = "איפור ערב"
    EVENING_HAIR = "שיער ערב"
    EVENING_MAKEUP_AND_HAIR = "איפור + שיער ערב"
    BRIDAL_PARTIAL = "כלה חלקי"
    BRIDAL_FULL = "כלה מלא"


@dataclass(frozen=True, slots=True)
class DescriptionEntry:
    """
    One dated note on a lead's timeline.

    `text` holds the skip marker when `skipped` is set (a deliberate no-update day).
    """

    date: str
    text: str
    skipped: bool = False


@dataclass(frozen=True, slots=True)
class LeadDraft:
    """
    Editable part of a Lead (everything except id and timestamps).

    Used as the form state of the lead editor and as the write payload for
    create/update. Transitions return new instances.
    """

    full_name: str = ""
    event_date: str = ""
    source: Source = Source.INSTAGRAM
    status: Status = Status.NEW
    inquiry_type: InquiryType = InquiryType.BRIDAL_FULL
    closed: bool = False
    advance_payment: bool = False
    additional_details: str = ""
    important_notes: str = ""
    descriptions: Tuple[DescriptionEntry, ...] = field(default_factory=tuple)

    @staticmethod
    def empty() -> "LeadDraft":
        """The blank template a new lead starts from."""

        return LeadDraft()

    @staticmethod
    def from_lead(lead: "Lead") -> "LeadDraft":
        """Copy the editable fields of an existing lead."""

        return LeadDraft(
            full_name=lead.full_name,
            event_date=lead.event_date,
            source=lead.source,
            status=lead.status,
            inquiry_type=lead.inquiry_type,
            closed=lead.closed,
            advance_payment=lead.advance_payment,
            additional_details=lead.additional_details,
            important_notes=lead.important_notes,
            descriptions=tuple(lead.descriptions),
        )

    def with_field(self, name: str, value: Any) -> "LeadDraft":
        """
        Return a copy with a single scalar field replaced.

        Source, status and inquiry type accept either an enum member or its
        stored value and are converted to the enum; anything else raises
        ValueError. `closed` and `advance_payment` must be bools.
        The timeline is not a scalar field; use `with_description`.
        """

        if name not in SCALAR_FIELDS:
            raise ValueError(f"Unknown or non-editable lead field: {name!r}")

        enum_cls = ENUM_FIELDS.get(name)
        if enum_cls is not None:
            value = enum_cls(value)
        elif name in BOOL_FIELDS and not isinstance(value, bool):
            raise ValueError(f"{name} must be a bool, got {value!r}")

        return replace(self, **{name: value})

    def with_description(self, entry: DescriptionEntry) -> "LeadDraft":
        return replace(self, descriptions=self.descriptions + (entry,))


SCALAR_FIELDS: frozenset[str] = frozenset(
    f.name for f in fields(LeadDraft) if f.name != "descriptions"
)

ENUM_FIELDS = {
    "source": Source,
    "status": Status,
    "inquiry_type": InquiryType,
}

BOOL_FIELDS: frozenset[str] = frozenset({"closed", "advance_payment"})


@dataclass(frozen=True, slots=True)
class Lead:
    """
    Cached copy of a lead record owned by the remote store.

    Notes:
    - `id` is assigned by the store on creation and never reused.
    - `created_at` is set once at creation; `updated_at` is refreshed on every write.
    """

    id: str
    full_name: str
    source: Source
    status: Status
    inquiry_type: InquiryType
    closed: bool
    advance_payment: bool
    additional_details: str
    important_notes: str
    descriptions: Tuple[DescriptionEntry, ...]
    created_at: datetime
    updated_at: datetime
    event_date: str = ""

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        require_utc_timestamp("updated_at", self.updated_at)
