"""
Shared FastAPI dependencies: the auth guard and the lead store/change source.

Tests replace these through `app.dependency_overrides`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from repositories import lead_repository
from repositories.client import get_supabase
from services.lead_sync_service import ChangeSource, SupabaseRealtimeChangeSource

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True)
class CurrentUser:
    """The signed-in operator, as reported by Supabase Auth."""

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """
    Resolve the bearer token to a user via Supabase Auth.

    Every lead route depends on this; requests without a valid session get 401.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        response = get_supabase().auth.get_user(credentials.credentials)
    except Exception as e:
        logger.warning(f"Token verification failed: {e}")
        raise _unauthorized("Invalid authentication credentials")

    user = getattr(response, "user", None)
    if user is None:
        raise _unauthorized("Invalid authentication credentials")

    metadata = getattr(user, "user_metadata", None) or {}
    return CurrentUser(
        id=str(user.id),
        email=getattr(user, "email", None),
        display_name=metadata.get("full_name") or metadata.get("name"),
    )


def get_lead_repository():
    """Lead persistence used by the routes (the Supabase repository module)."""
    return lead_repository


def get_change_source() -> ChangeSource:
    """A fresh realtime change source per live stream."""
    return SupabaseRealtimeChangeSource()
