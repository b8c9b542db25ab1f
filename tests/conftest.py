"""
Pytest configuration and shared fakes.

This file adds the project root to the Python path so that tests can import
from the domain, repositories, services and api packages, and provides
in-memory stand-ins for the lead store and the notification surface.
"""

import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.lead import InquiryType, Lead, LeadDraft, Source, Status  # noqa: E402
from repositories.lead_repository import LeadNotFoundError, LeadStoreError  # noqa: E402


def make_lead(
    lead_id: str = "lead-1",
    full_name: str = "Noa Levi",
    source: Source = Source.INSTAGRAM,
    status: Status = Status.NEW,
    inquiry_type: InquiryType = InquiryType.BRIDAL_FULL,
    closed: bool = False,
    advance_payment: bool = False,
    created_at: Optional[datetime] = None,
    updated_at: Optional[datetime] = None,
    **kwargs,
) -> Lead:
    created = created_at or datetime(2025, 1, 1, 9, 0, 0, tzinfo=timezone.utc)
    return Lead(
        id=lead_id,
        full_name=full_name,
        source=source,
        status=status,
        inquiry_type=inquiry_type,
        closed=closed,
        advance_payment=advance_payment,
        additional_details=kwargs.pop("additional_details", ""),
        important_notes=kwargs.pop("important_notes", ""),
        descriptions=kwargs.pop("descriptions", ()),
        created_at=created,
        updated_at=updated_at or created,
        **kwargs,
    )


class RecordingNotifier:
    def __init__(self) -> None:
        self.successes: List[str] = []
        self.errors: List[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeLeadStore:
    """In-memory lead store with the same surface as `repositories.lead_repository`."""

    def __init__(self, leads: Tuple[Lead, ...] = ()) -> None:
        self.leads: Dict[str, Lead] = {lead.id: lead for lead in leads}
        self.calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None
        self._next_id = 1

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def insert_lead(self, draft: LeadDraft, created_at: datetime, updated_at: datetime) -> str:
        self.calls.append(("insert", draft, created_at, updated_at))
        self._maybe_fail()
        lead_id = f"new-{self._next_id}"
        self._next_id += 1
        self.leads[lead_id] = Lead(
            id=lead_id,
            full_name=draft.full_name,
            event_date=draft.event_date,
            source=draft.source,
            status=draft.status,
            inquiry_type=draft.inquiry_type,
            closed=draft.closed,
            advance_payment=draft.advance_payment,
            additional_details=draft.additional_details,
            important_notes=draft.important_notes,
            descriptions=draft.descriptions,
            created_at=created_at,
            updated_at=updated_at,
        )
        return lead_id

    def update_lead(self, lead_id: str, draft: LeadDraft, updated_at: datetime) -> None:
        self.calls.append(("update", lead_id, draft, updated_at))
        self._maybe_fail()
        existing = self.leads.get(lead_id)
        if existing is None:
            raise LeadNotFoundError(f"Lead not found: {lead_id}")
        self.leads[lead_id] = replace(
            existing,
            full_name=draft.full_name,
            event_date=draft.event_date,
            source=draft.source,
            status=draft.status,
            inquiry_type=draft.inquiry_type,
            closed=draft.closed,
            advance_payment=draft.advance_payment,
            additional_details=draft.additional_details,
            important_notes=draft.important_notes,
            descriptions=draft.descriptions,
            updated_at=updated_at,
        )

    def delete_lead(self, lead_id: str) -> None:
        self.calls.append(("delete", lead_id))
        self._maybe_fail()
        self.leads.pop(lead_id, None)

    def get_lead_by_id(self, lead_id: str) -> Optional[Lead]:
        self._maybe_fail()
        return self.leads.get(lead_id)

    def list_leads(self) -> List[Lead]:
        self._maybe_fail()
        return sorted(self.leads.values(), key=lambda lead: lead.created_at, reverse=True)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def store() -> FakeLeadStore:
    return FakeLeadStore()


@pytest.fixture
def offline_error() -> LeadStoreError:
    return LeadStoreError("Failed to insert lead: network unreachable")
