"""
Tests for `services/lead_stats_service.py` and `services/lead_presenter.py`.
"""

from __future__ import annotations

from conftest import make_lead
from domain.lead import Source, Status
from services.lead_presenter import (
    SOURCE_ICONS,
    STATUS_STYLES,
    UNNAMED_LEAD,
    display_name,
    notes_preview,
    source_icon,
    status_style,
)
from services.lead_stats_service import LeadStats, compute_stats


def test_compute_stats_counts_full_list() -> None:
    leads = [
        make_lead(lead_id="1", status=Status.FOLLOW_UP, advance_payment=True),
        make_lead(lead_id="2", status=Status.CLOSED, closed=False),
        make_lead(lead_id="3", status=Status.NEW, closed=True, advance_payment=True),
        make_lead(lead_id="4", status=Status.FOLLOW_UP),
    ]

    assert compute_stats(leads) == LeadStats(total=4, closed=1, follow_up=2, advance_paid=2)


def test_compute_stats_empty() -> None:
    assert compute_stats([]) == LeadStats(total=0, closed=0, follow_up=0, advance_paid=0)


def test_display_name_falls_back_for_empty_name() -> None:
    assert display_name(make_lead(full_name="")) == UNNAMED_LEAD
    assert display_name(make_lead(full_name="Noa Levi")) == "Noa Levi"


def test_notes_preview_truncates_after_fifty_characters() -> None:
    short = "x" * 50
    long = "y" * 51

    assert notes_preview(short) == short
    assert notes_preview(long) == "y" * 50 + "..."
    assert notes_preview("") == ""


def test_presentation_maps_cover_every_enum_member() -> None:
    assert set(STATUS_STYLES) == set(Status)
    assert set(SOURCE_ICONS) == set(Source)
    assert status_style(Status.FOLLOW_UP) == "status-followup"
    assert source_icon(Source.TIKTOK) == "tiktok"
