"""
Dashboard statistics over the full (unfiltered) lead list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from domain.lead import Lead, Status


@dataclass(frozen=True, slots=True)
class LeadStats:
    total: int
    closed: int
    follow_up: int
    advance_paid: int


def compute_stats(leads: Iterable[Lead]) -> LeadStats:
    """
    Count leads for the stats cards.

    `closed` counts the closed flag, not the "closed" pipeline status; the two
    are independent.
    """

    total = closed = follow_up = advance_paid = 0
    for lead in leads:
        total += 1
        if lead.closed:
            closed += 1
        if lead.status == Status.FOLLOW_UP:
            follow_up += 1
        if lead.advance_payment:
            advance_paid += 1

    return LeadStats(
        total=total,
        closed=closed,
        follow_up=follow_up,
        advance_paid=advance_paid,
    )


__all__ = ["LeadStats", "compute_stats"]
