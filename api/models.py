"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.lead import DescriptionEntry, InquiryType, Lead, LeadDraft, Source, Status
from services.lead_presenter import display_name, notes_preview, source_icon, status_style
from services.lead_stats_service import LeadStats


# ============================================================================
# Lead Models
# ============================================================================

class DescriptionEntryModel(BaseModel):
    """Single timeline entry."""
    date: str
    text: str
    skipped: bool = False


class LeadDraftRequest(BaseModel):
    """Editable lead fields, used for create and full update."""
    full_name: str = ""
    event_date: str = ""
    source: Source = Source.INSTAGRAM
    status: Status = Status.NEW
    inquiry_type: InquiryType = InquiryType.BRIDAL_FULL
    closed: bool = False
    advance_payment: bool = False
    additional_details: str = ""
    important_notes: str = ""
    descriptions: List[DescriptionEntryModel] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "full_name": "Noa Levi",
                "event_date": "2025-06-12",
                "source": "אינסטגרם",
                "status": "חדש",
                "inquiry_type": "כלה מלא",
                "closed": False,
                "advance_payment": False,
                "additional_details": "",
                "important_notes": "Prefers natural look",
                "descriptions": [
                    {"date": "01/05/2025", "text": "Sent price list", "skipped": False}
                ]
            }
        }
    )

    def to_draft(self) -> LeadDraft:
        return LeadDraft(
            full_name=self.full_name,
            event_date=self.event_date,
            source=self.source,
            status=self.status,
            inquiry_type=self.inquiry_type,
            closed=self.closed,
            advance_payment=self.advance_payment,
            additional_details=self.additional_details,
            important_notes=self.important_notes,
            descriptions=tuple(
                DescriptionEntry(date=d.date, text=d.text, skipped=d.skipped)
                for d in self.descriptions
            ),
        )


class DescriptionAppendRequest(BaseModel):
    """Request to add today's timeline entry to a lead."""
    text: str = ""
    skipped: bool = False


class LeadResponse(BaseModel):
    """Lead with the card presentation fields."""
    id: str
    full_name: str
    event_date: str
    source: Source
    status: Status
    inquiry_type: InquiryType
    closed: bool
    advance_payment: bool
    additional_details: str
    important_notes: str
    descriptions: List[DescriptionEntryModel]
    created_at: datetime
    updated_at: datetime

    # Card presentation
    display_name: str
    notes_preview: str
    status_style: str
    source_icon: str

    @classmethod
    def from_lead(cls, lead: Lead) -> "LeadResponse":
        return cls(
            id=lead.id,
            full_name=lead.full_name,
            event_date=lead.event_date,
            source=lead.source,
            status=lead.status,
            inquiry_type=lead.inquiry_type,
            closed=lead.closed,
            advance_payment=lead.advance_payment,
            additional_details=lead.additional_details,
            important_notes=lead.important_notes,
            descriptions=[
                DescriptionEntryModel(date=d.date, text=d.text, skipped=d.skipped)
                for d in lead.descriptions
            ],
            created_at=lead.created_at,
            updated_at=lead.updated_at,
            display_name=display_name(lead),
            notes_preview=notes_preview(lead.important_notes),
            status_style=status_style(lead.status),
            source_icon=source_icon(lead.source),
        )


class LeadListResponse(BaseModel):
    """Response for the filtered lead listing."""
    items: List[LeadResponse]
    visible_count: int
    total_count: int
    has_active_filters: bool
    filters_applied: dict

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [],
                "visible_count": 3,
                "total_count": 42,
                "has_active_filters": True,
                "filters_applied": {"status": "פולואפ", "search": "noa"}
            }
        }
    )


class LeadCreatedResponse(BaseModel):
    """Response after creating a lead."""
    id: str


class LeadDeletedResponse(BaseModel):
    """Response after deleting a lead."""
    id: str
    deleted: bool


class LeadStatsResponse(BaseModel):
    """Counts shown on the dashboard stats cards (full list, not filtered)."""
    total: int
    closed: int
    follow_up: int
    advance_paid: int

    @classmethod
    def from_stats(cls, stats: LeadStats) -> "LeadStatsResponse":
        return cls(
            total=stats.total,
            closed=stats.closed,
            follow_up=stats.follow_up,
            advance_paid=stats.advance_paid,
        )


# ============================================================================
# User Models
# ============================================================================

class UserResponse(BaseModel):
    """Signed-in user."""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Invalid request",
                "detail": "Lead not found",
                "status_code": 404
            }
        }
    )
