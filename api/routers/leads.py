"""
Leads API Endpoints.

Endpoints for browsing, filtering, creating, editing and deleting leads, plus a
Server-Sent Events stream of live full-list snapshots. Every route requires a
signed-in user.
"""

import json
import logging
from enum import Enum
from typing import Optional, Type, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from api.dependencies import get_change_source, get_current_user, get_lead_repository
from api.models import (
    DescriptionAppendRequest,
    ErrorResponse,
    LeadCreatedResponse,
    LeadDeletedResponse,
    LeadDraftRequest,
    LeadListResponse,
    LeadResponse,
    LeadStatsResponse,
)
from domain.lead import InquiryType, LeadDraft, Source, Status
from domain.timeline import can_add_entry, new_entry
from repositories.lead_repository import LeadNotFoundError, LeadStoreError
from services.lead_filter_service import (
    ALL,
    ClosedFilter,
    LeadFilters,
    PaymentFilter,
    apply_filters,
    has_active_filters,
)
from services.lead_service import create_lead, delete_lead_with_confirmation, update_lead
from services.lead_stats_service import compute_stats
from services.lead_sync_service import LeadFeed
from services.notifications import DELETE_CONFIRMATION_PROMPT, LEADS_LOAD_FAILED, LoggingNotifier

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

E = TypeVar("E", bound=Enum)


def _parse_facet(enum_cls: Type[E], value: Optional[str], name: str) -> Optional[E]:
    """Absent, empty or "הכל" means no filter on this facet."""
    if value is None or value == "" or value == ALL:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {name}. Must be one of: {ALL}, {allowed}; got '{value}'"
        )


def _store_failure(action: str, e: LeadStoreError) -> HTTPException:
    logger.error(f"Lead store failure while trying to {action}: {e}")
    return HTTPException(
        status_code=502,
        detail=f"Failed to {action}: {str(e)}"
    )


def _load_lead(repository, lead_id: str):
    try:
        lead = repository.get_lead_by_id(lead_id)
    except LeadStoreError as e:
        raise _store_failure("fetch lead", e)
    if lead is None:
        raise HTTPException(status_code=404, detail=f"Lead not found: {lead_id}")
    return lead


@router.get(
    "/leads",
    response_model=LeadListResponse,
    summary="List Leads",
    description="Full lead list, newest first, filtered in memory by the given facets."
)
def list_leads(
    status_filter: Optional[str] = Query(None, alias="status", description="Pipeline status, or 'הכל'"),
    source: Optional[str] = Query(None, description="Inbound channel, or 'הכל'"),
    inquiry_type: Optional[str] = Query(None, description="Service category, or 'הכל'"),
    closed: Optional[str] = Query(None, description="'הכל', 'פתוח' or 'סגור'"),
    payment: Optional[str] = Query(None, description="'הכל', 'שולם' or 'לא שולם'"),
    search: str = Query("", description="Case-insensitive substring of the full name"),
    repository=Depends(get_lead_repository),
):
    """
    List leads with optional filters.

    All facets are combined with AND. A facet that is absent or set to `הכל`
    imposes no constraint.

    **Example usage:**
    - All leads: `GET /api/v1/leads`
    - Follow-ups only: `GET /api/v1/leads?status=פולואפ`
    - Open leads that paid an advance: `GET /api/v1/leads?closed=פתוח&payment=שולם`
    - Name search: `GET /api/v1/leads?search=noa`
    """
    filters = LeadFilters(
        status=_parse_facet(Status, status_filter, "status"),
        source=_parse_facet(Source, source, "source"),
        inquiry_type=_parse_facet(InquiryType, inquiry_type, "inquiry_type"),
        closed=_parse_facet(ClosedFilter, closed, "closed") or ClosedFilter.ALL,
        payment=_parse_facet(PaymentFilter, payment, "payment") or PaymentFilter.ALL,
        search=search,
    )

    try:
        leads = repository.list_leads()
    except LeadStoreError as e:
        raise _store_failure("list leads", e)

    result = apply_filters(leads, filters)

    # Build filters applied dict for response
    filters_applied = {}
    if filters.status is not None:
        filters_applied["status"] = filters.status.value
    if filters.source is not None:
        filters_applied["source"] = filters.source.value
    if filters.inquiry_type is not None:
        filters_applied["inquiry_type"] = filters.inquiry_type.value
    if filters.closed != ClosedFilter.ALL:
        filters_applied["closed"] = filters.closed.value
    if filters.payment != PaymentFilter.ALL:
        filters_applied["payment"] = filters.payment.value
    if filters.search:
        filters_applied["search"] = filters.search

    return LeadListResponse(
        items=[LeadResponse.from_lead(lead) for lead in result.leads],
        visible_count=result.visible_count,
        total_count=result.total_count,
        has_active_filters=has_active_filters(filters),
        filters_applied=filters_applied,
    )


@router.get(
    "/leads/stats",
    response_model=LeadStatsResponse,
    summary="Lead Stats",
    description="Totals over the full list: all, closed, follow-up and advance paid."
)
def get_lead_stats(repository=Depends(get_lead_repository)):
    try:
        leads = repository.list_leads()
    except LeadStoreError as e:
        raise _store_failure("list leads", e)
    return LeadStatsResponse.from_stats(compute_stats(leads))


@router.get(
    "/leads/stream",
    summary="Live Lead Stream",
    description="Server-Sent Events: one event with the full lead list per change."
)
async def stream_leads(
    repository=Depends(get_lead_repository),
    change_source=Depends(get_change_source),
):
    """
    Stream full-list snapshots as they change.

    The first event is the initial load. If the subscription or a read fails,
    a final `error` event carries the load-failure message and the stream
    ends; reconnect to re-subscribe.
    """

    async def events():
        async with LeadFeed(fetch=repository.list_leads, change_source=change_source) as feed:
            async for snapshot in feed:
                payload = [LeadResponse.from_lead(lead).model_dump(mode="json") for lead in snapshot]
                yield f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"
            if feed.failed:
                error = json.dumps({"error": LEADS_LOAD_FAILED}, ensure_ascii=False)
                yield f"event: error\ndata: {error}\n\n"

    return StreamingResponse(events(), media_type="text/event-stream")


@router.get(
    "/leads/{lead_id}",
    response_model=LeadResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get Lead"
)
def get_lead(lead_id: str, repository=Depends(get_lead_repository)):
    return LeadResponse.from_lead(_load_lead(repository, lead_id))


@router.post(
    "/leads",
    response_model=LeadCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Lead",
    description="Create a lead; created_at and updated_at are both set to now."
)
def create_new_lead(request: LeadDraftRequest, repository=Depends(get_lead_repository)):
    try:
        lead_id = create_lead(request.to_draft(), store=repository)
    except LeadStoreError as e:
        raise _store_failure("create lead", e)
    return LeadCreatedResponse(id=lead_id)


@router.put(
    "/leads/{lead_id}",
    response_model=LeadResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Update Lead",
    description="Overwrite all editable fields; created_at is kept and updated_at refreshed."
)
def update_existing_lead(
    lead_id: str,
    request: LeadDraftRequest,
    repository=Depends(get_lead_repository),
):
    lead = _load_lead(repository, lead_id)
    try:
        update_lead(lead, request.to_draft(), store=repository)
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail=f"Lead not found: {lead_id}")
    except LeadStoreError as e:
        raise _store_failure("update lead", e)
    return LeadResponse.from_lead(_load_lead(repository, lead_id))


@router.post(
    "/leads/{lead_id}/descriptions",
    response_model=LeadResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Add Timeline Entry",
    description="Append today's note (or a skipped-day marker) to the lead's timeline."
)
def add_description(
    lead_id: str,
    request: DescriptionAppendRequest,
    repository=Depends(get_lead_repository),
):
    if not can_add_entry(request.text, request.skipped):
        raise HTTPException(
            status_code=422,
            detail="Timeline entry text must not be blank unless the day is skipped"
        )

    lead = _load_lead(repository, lead_id)
    draft = LeadDraft.from_lead(lead).with_description(new_entry(request.text, request.skipped))
    try:
        update_lead(lead, draft, store=repository)
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail=f"Lead not found: {lead_id}")
    except LeadStoreError as e:
        raise _store_failure("update lead", e)
    return LeadResponse.from_lead(_load_lead(repository, lead_id))


@router.delete(
    "/leads/{lead_id}",
    response_model=LeadDeletedResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Delete Lead",
    description="Delete a lead. Requires confirm=true; otherwise nothing is deleted."
)
def delete_existing_lead(
    lead_id: str,
    confirm: bool = Query(False, description="Explicit confirmation of the deletion"),
    repository=Depends(get_lead_repository),
):
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail=f"Deletion requires confirm=true ({DELETE_CONFIRMATION_PROMPT})"
        )

    deleted = delete_lead_with_confirmation(
        lead_id,
        confirm=lambda _prompt: True,
        notifier=LoggingNotifier(),
        store=repository,
    )
    if not deleted:
        raise HTTPException(status_code=502, detail="Failed to delete lead")
    return LeadDeletedResponse(id=lead_id, deleted=True)
