"""
Lead write service.

Owns the timestamp policy for writes and the confirmation gate for deletes:
- create: created_at == updated_at == now
- update: created_at untouched, updated_at = now (never earlier than the previous value)
- delete: nothing reaches the store unless the user confirmed

Last write wins: updates carry no version check.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from domain.lead import Lead, LeadDraft
from domain.time import utc_now
from repositories import lead_repository
from repositories.lead_repository import LeadStoreError
from services.notifications import (
    DELETE_CONFIRMATION_PROMPT,
    LEAD_DELETE_FAILED,
    LEAD_DELETED,
    Notifier,
)

logger = logging.getLogger(__name__)


class LeadStore(Protocol):
    """Write side of the lead store (implemented by `repositories.lead_repository`)."""

    def insert_lead(self, draft: LeadDraft, created_at: datetime, updated_at: datetime) -> str: ...

    def update_lead(self, lead_id: str, draft: LeadDraft, updated_at: datetime) -> None: ...

    def delete_lead(self, lead_id: str) -> None: ...


def default_store() -> LeadStore:
    """The Supabase-backed repository module."""

    return lead_repository  # type: ignore[return-value]


def create_lead(
    draft: LeadDraft,
    store: Optional[LeadStore] = None,
    now: Optional[datetime] = None,
) -> str:
    """Create a lead from a draft and return the store-assigned id."""

    stamp = now or utc_now()
    return (store or default_store()).insert_lead(draft, stamp, stamp)


def update_lead(
    lead: Lead,
    draft: LeadDraft,
    store: Optional[LeadStore] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """
    Overwrite the editable fields of `lead` with `draft`.

    Returns the updated_at that was written.
    """

    stamp = max(now or utc_now(), lead.updated_at)
    (store or default_store()).update_lead(lead.id, draft, stamp)
    return stamp


def delete_lead_with_confirmation(
    lead_id: str,
    confirm: Callable[[str], bool],
    notifier: Notifier,
    store: Optional[LeadStore] = None,
) -> bool:
    """
    Ask for confirmation, then delete.

    Returns True only when the store accepted the deletion. Failures are
    reported through the notifier and never raised.
    """

    if not confirm(DELETE_CONFIRMATION_PROMPT):
        logger.info("Delete of lead %s cancelled by user", lead_id)
        return False

    try:
        (store or default_store()).delete_lead(lead_id)
    except LeadStoreError:
        logger.exception("Error deleting lead %s", lead_id)
        notifier.error(LEAD_DELETE_FAILED)
        return False

    notifier.success(LEAD_DELETED)
    return True


__all__ = [
    "LeadStore",
    "default_store",
    "create_lead",
    "update_lead",
    "delete_lead_with_confirmation",
]
