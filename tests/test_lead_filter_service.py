"""
Tests for `services/lead_filter_service.py`.

Covers:
- Neutral filters yield the full list unchanged and in order.
- Each facet alone, and facets combined with AND.
- Case-insensitive substring search on full_name only.
- clear_filters is idempotent; has_active_filters reflects any non-neutral facet.
"""

from __future__ import annotations

from itertools import product

import pytest

from conftest import make_lead
from domain.lead import InquiryType, Source, Status
from services.lead_filter_service import (
    ClosedFilter,
    LeadFilters,
    PaymentFilter,
    apply_filters,
    clear_filters,
    filter_leads,
    has_active_filters,
)


@pytest.fixture
def noa_and_dana():
    noa = make_lead(
        lead_id="noa",
        full_name="Noa Levi",
        source=Source.INSTAGRAM,
        status=Status.NEW,
        closed=False,
        advance_payment=False,
    )
    dana = make_lead(
        lead_id="dana",
        full_name="Dana Cohen",
        source=Source.PHONE,
        status=Status.CLOSED,
        closed=True,
        advance_payment=True,
    )
    return [noa, dana]


@pytest.fixture
def mixed_leads():
    return [
        make_lead(lead_id="a", full_name="Noa Levi", source=Source.INSTAGRAM, status=Status.NEW,
                  inquiry_type=InquiryType.BRIDAL_FULL),
        make_lead(lead_id="b", full_name="Dana Cohen", source=Source.PHONE, status=Status.CLOSED,
                  inquiry_type=InquiryType.EVENING_MAKEUP, closed=True, advance_payment=True),
        make_lead(lead_id="c", full_name="", source=Source.TIKTOK, status=Status.FOLLOW_UP,
                  inquiry_type=InquiryType.EVENING_HAIR, advance_payment=True),
        make_lead(lead_id="d", full_name="Noam Bar", source=Source.EMAIL, status=Status.INITIAL_RESPONSE,
                  inquiry_type=InquiryType.BRIDAL_PARTIAL, closed=True),
        make_lead(lead_id="e", full_name="Shira NOA", source=Source.FACEBOOK, status=Status.FOLLOW_UP,
                  inquiry_type=InquiryType.EVENING_MAKEUP_AND_HAIR),
    ]


def test_neutral_filters_return_full_list_in_order(mixed_leads) -> None:
    visible = filter_leads(mixed_leads, LeadFilters())

    assert visible == mixed_leads


def test_status_filter_scenario(noa_and_dana) -> None:
    visible = filter_leads(noa_and_dana, LeadFilters(status=Status("נסגר")))

    assert [lead.full_name for lead in visible] == ["Dana Cohen"]


def test_search_is_case_insensitive_substring(noa_and_dana) -> None:
    visible = filter_leads(noa_and_dana, LeadFilters(search="noa"))

    assert [lead.full_name for lead in visible] == ["Noa Levi"]


def test_search_matches_full_name_only(mixed_leads) -> None:
    """Search does not look at notes or other text fields; empty names never match a query."""

    visible = filter_leads(mixed_leads, LeadFilters(search="noa"))

    assert [lead.id for lead in visible] == ["a", "d", "e"]


def test_closed_facet(mixed_leads) -> None:
    closed_only = filter_leads(mixed_leads, LeadFilters(closed=ClosedFilter.CLOSED))
    open_only = filter_leads(mixed_leads, LeadFilters(closed=ClosedFilter.OPEN))

    assert [lead.id for lead in closed_only] == ["b", "d"]
    assert [lead.id for lead in open_only] == ["a", "c", "e"]


def test_payment_facet(mixed_leads) -> None:
    paid = filter_leads(mixed_leads, LeadFilters(payment=PaymentFilter.PAID))
    unpaid = filter_leads(mixed_leads, LeadFilters(payment=PaymentFilter.UNPAID))

    assert [lead.id for lead in paid] == ["b", "c"]
    assert [lead.id for lead in unpaid] == ["a", "d", "e"]


def test_source_and_inquiry_facets(mixed_leads) -> None:
    assert [l.id for l in filter_leads(mixed_leads, LeadFilters(source=Source.TIKTOK))] == ["c"]
    assert [
        l.id for l in filter_leads(mixed_leads, LeadFilters(inquiry_type=InquiryType.BRIDAL_PARTIAL))
    ] == ["d"]


def test_facets_are_anded(mixed_leads) -> None:
    visible = filter_leads(
        mixed_leads,
        LeadFilters(status=Status.FOLLOW_UP, payment=PaymentFilter.UNPAID),
    )

    assert [lead.id for lead in visible] == ["e"]


def test_every_facet_combination_is_the_conjunction(mixed_leads) -> None:
    """For every combination of facet values, visible == subset satisfying all active facets."""

    statuses = [None, *Status]
    closed_values = list(ClosedFilter)
    payment_values = list(PaymentFilter)
    searches = ["", "no", "COHEN"]

    def expected(lead, f: LeadFilters) -> bool:
        ok = f.status is None or lead.status == f.status
        ok = ok and (f.closed == ClosedFilter.ALL or lead.closed == (f.closed == ClosedFilter.CLOSED))
        ok = ok and (f.payment == PaymentFilter.ALL or lead.advance_payment == (f.payment == PaymentFilter.PAID))
        ok = ok and f.search.lower() in lead.full_name.lower()
        return ok

    for status, closed, payment, search in product(statuses, closed_values, payment_values, searches):
        filters = LeadFilters(status=status, closed=closed, payment=payment, search=search)
        assert filter_leads(mixed_leads, filters) == [l for l in mixed_leads if expected(l, filters)]


def test_clear_filters_is_neutral_and_idempotent() -> None:
    once = clear_filters()
    twice = clear_filters()

    assert once == twice == LeadFilters()
    assert has_active_filters(once) is False


@pytest.mark.parametrize(
    "filters",
    [
        LeadFilters(status=Status.NEW),
        LeadFilters(source=Source.EMAIL),
        LeadFilters(inquiry_type=InquiryType.EVENING_HAIR),
        LeadFilters(closed=ClosedFilter.OPEN),
        LeadFilters(payment=PaymentFilter.UNPAID),
        LeadFilters(search="x"),
    ],
)
def test_has_active_filters_for_each_facet(filters: LeadFilters) -> None:
    assert has_active_filters(filters) is True


def test_apply_filters_reports_visible_and_total(noa_and_dana) -> None:
    result = apply_filters(iter(noa_and_dana), LeadFilters(closed=ClosedFilter.OPEN))

    assert result.visible_count == 1
    assert result.total_count == 2
