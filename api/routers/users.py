"""
User API Endpoints.
"""

from fastapi import APIRouter, Depends

from api.dependencies import CurrentUser, get_current_user
from api.models import UserResponse

router = APIRouter()


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current User",
    description="Return the signed-in user shown in the dashboard header."
)
def get_me(user: CurrentUser = Depends(get_current_user)):
    return UserResponse(id=user.id, email=user.email, display_name=user.display_name)
