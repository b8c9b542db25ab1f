"""
Filter/search engine for the lead list.

A pure function from (full list, filter state) to the visible subset. Six
independent facets are ANDed together:
- status, source, inquiry type: equality (None = no filter)
- closed flag: all / open only / closed only
- advance payment: all / paid only / unpaid only
- search: case-insensitive substring of full_name (empty = no filter)

The whole list is scanned on every call; order of the input is preserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from domain.lead import InquiryType, Lead, Source, Status

# Neutral value of every facet as shown in the UI.
ALL: str = "הכל"


class ClosedFilter(str, Enum):
    ALL = ALL
    OPEN = "פתוח"
    CLOSED = "סגור"


class PaymentFilter(str, Enum):
    ALL = ALL
    PAID = "שולם"
    UNPAID = "לא שולם"


@dataclass(frozen=True, slots=True)
class LeadFilters:
    """Filter state. The default instance is the neutral state (everything visible)."""

    status: Optional[Status] = None
    source: Optional[Source] = None
    inquiry_type: Optional[InquiryType] = None
    closed: ClosedFilter = ClosedFilter.ALL
    payment: PaymentFilter = PaymentFilter.ALL
    search: str = ""


@dataclass(frozen=True, slots=True)
class FilterResult:
    """Visible subset plus the counts shown above the grid ("showing X of Y")."""

    leads: List[Lead]
    total_count: int

    @property
    def visible_count(self) -> int:
        return len(self.leads)


def clear_filters() -> LeadFilters:
    """Reset all six facets to neutral at once."""

    return LeadFilters()


def has_active_filters(filters: LeadFilters) -> bool:
    return filters != clear_filters()


def matches(lead: Lead, filters: LeadFilters) -> bool:
    if filters.status is not None and lead.status != filters.status:
        return False
    if filters.source is not None and lead.source != filters.source:
        return False
    if filters.inquiry_type is not None and lead.inquiry_type != filters.inquiry_type:
        return False

    if filters.closed == ClosedFilter.CLOSED and not lead.closed:
        return False
    if filters.closed == ClosedFilter.OPEN and lead.closed:
        return False

    if filters.payment == PaymentFilter.PAID and not lead.advance_payment:
        return False
    if filters.payment == PaymentFilter.UNPAID and lead.advance_payment:
        return False

    if filters.search and filters.search.lower() not in lead.full_name.lower():
        return False

    return True


def filter_leads(leads: Iterable[Lead], filters: LeadFilters) -> List[Lead]:
    return [lead for lead in leads if matches(lead, filters)]


def apply_filters(leads: Iterable[Lead], filters: LeadFilters) -> FilterResult:
    """Filter and keep the size of the full list for the result summary."""

    full = list(leads)
    return FilterResult(leads=filter_leads(full, filters), total_count=len(full))


__all__ = [
    "ALL",
    "ClosedFilter",
    "PaymentFilter",
    "LeadFilters",
    "FilterResult",
    "clear_filters",
    "has_active_filters",
    "matches",
    "filter_leads",
    "apply_filters",
]
