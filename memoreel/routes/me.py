"""
me.py
-----
Purpose:
    Profile endpoints for the authenticated user.

    - GET /api/v1/me    returns the caller's profile
    - PATCH /api/v1/me  updates first/last name
"""

from fastapi import APIRouter, Depends, HTTPException, status

from memoreel.auth.verify import current_user_id
from memoreel.db.helpers import DatabaseError
from memoreel.dependencies import get_user_service
from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.api.user_request import UpdateProfileRequest
from memoreel.models.api.user_response import UserProfileResponse
from memoreel.models.domain.errors import NotFoundError, NotUpdatedError
from memoreel.services.user_service import UserService

router = APIRouter(prefix="/api/v1/me", tags=["me"])
logger = get_logger(__name__)


@router.get("", response_model=UserProfileResponse)
async def me(
    user_id: str = Depends(current_user_id), service: UserService = Depends(get_user_service)
):
    try:
        user = await service.get_profile(user_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found")
    except DatabaseError as e:
        logger.error("Error loading profile", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load profile"
        )

    return UserProfileResponse.from_domain(user)


@router.patch("", response_model=UserProfileResponse)
async def update_me(
    request: UpdateProfileRequest,
    user_id: str = Depends(current_user_id),
    service: UserService = Depends(get_user_service),
):
    try:
        user = await service.update_profile(
            user_id, first_name=request.first_name, last_name=request.last_name
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found")
    except NotUpdatedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DatabaseError as e:
        logger.error("Error updating profile", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update profile"
        )

    return UserProfileResponse.from_domain(user)
