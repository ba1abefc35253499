"""
reels.py
--------
Purpose:
    API endpoints for reels and their recipients.

Architecture:
    - API layer: HTTP concerns, validation, auth, error -> status mapping
    - Service layer: ReelService returns domain models (Reel)
    - API layer: converts domain models -> ReelResponse

Usage:
    1. POST   /api/v1/reels                                   - create (sender confirms by email)
    2. POST   /api/v1/reels/confirm                           - confirm with emailed token
    3. GET    /api/v1/reels                                   - cursor-paginated listing
    4. GET    /api/v1/reels/{reel_id}                         - owner view
    5. PUT    /api/v1/reels/{reel_id}                         - edit metadata
    6. DELETE /api/v1/reels/{reel_id}                         - soft delete
    7. POST   /api/v1/reels/{reel_id}/recipients              - add recipients
    8. DELETE /api/v1/reels/{reel_id}/recipients/{recipient}  - remove one recipient
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from memoreel.auth.verify import current_user_id
from memoreel.config import Settings
from memoreel.db.helpers import DatabaseError
from memoreel.dependencies import get_reel_service, get_settings
from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.api.reel_request import (
    AddRecipientsRequest,
    ConfirmReelRequest,
    CreateReelRequest,
    UpdateReelRequest,
)
from memoreel.models.api.reel_response import (
    ConfirmReelResponse,
    PaginationResponse,
    ReelListResponse,
    ReelResponse,
)
from memoreel.models.domain.errors import NotDeletedError, NotFoundError, NotUpdatedError
from memoreel.models.domain.pagination import Pageable
from memoreel.models.domain.reel_domain import ReelFilter
from memoreel.services.reel_service import ReelAlreadyConfirmedError, ReelService
from memoreel.utils.ids import FIRST_PAGE_CURSOR

router = APIRouter(prefix="/api/v1/reels", tags=["reels"])
logger = get_logger(__name__)


def _storage_failure(action: str, error: Exception) -> HTTPException:
    logger.error("Reel storage failure", action=action, error=str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {action}"
    )


@router.post("", response_model=ReelResponse, status_code=status.HTTP_201_CREATED)
async def create_reel(
    request: CreateReelRequest, service: ReelService = Depends(get_reel_service)
):
    try:
        reel = await service.create_reel(
            video_id=request.video_id,
            email=request.email,
            recipient_emails=request.recipients,
            title=request.title,
            description=request.description,
            private=request.private,
            delivery_date=request.delivery_date,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DatabaseError as e:
        raise _storage_failure("create reel", e)

    return ReelResponse.from_domain(reel)


@router.post("/confirm", response_model=ConfirmReelResponse)
async def confirm_reel(
    request: ConfirmReelRequest, service: ReelService = Depends(get_reel_service)
):
    try:
        reel = await service.confirm_reel(request.token)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid token")
    except ReelAlreadyConfirmedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except NotUpdatedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DatabaseError as e:
        raise _storage_failure("confirm reel", e)

    return ConfirmReelResponse(
        success=True, reel_id=reel.id, delivery_status=reel.delivery_status
    )


@router.get("", response_model=ReelListResponse)
async def list_reels(
    user_id: str = Depends(current_user_id),
    service: ReelService = Depends(get_reel_service),
    settings: Settings = Depends(get_settings),
    per_page: int | None = Query(default=None, ge=1, description="Reels per page"),
    cursor: str | None = Query(default=None, description="Cursor from the previous page"),
    delivery_status: str | None = Query(
        default=None, description="unconfirmed, scheduled, failed or delivered"
    ),
):
    """
    List the caller's reels, newest first.

    Omitting the cursor returns the most recent page. An unrecognised
    delivery_status is ignored.
    """
    pageable = Pageable(
        per_page=min(per_page or settings.DEFAULT_PER_PAGE, settings.MAX_PER_PAGE),
        cursor=cursor or FIRST_PAGE_CURSOR,
    )

    try:
        reels, pagination = await service.list_reels(
            user_id, ReelFilter(delivery_status=delivery_status), pageable
        )
    except DatabaseError as e:
        raise _storage_failure("list reels", e)

    return ReelListResponse(
        items=[ReelResponse.from_domain(reel) for reel in reels],
        pagination=PaginationResponse(**pagination.model_dump()),
    )


@router.get("/{reel_id}", response_model=ReelResponse)
async def get_reel(
    reel_id: str,
    user_id: str = Depends(current_user_id),
    service: ReelService = Depends(get_reel_service),
):
    try:
        reel = await service.get_reel(user_id, reel_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reel not found")
    except DatabaseError as e:
        raise _storage_failure("get reel", e)

    return ReelResponse.from_domain(reel)


@router.put("/{reel_id}", response_model=ReelResponse)
async def update_reel(
    reel_id: str,
    request: UpdateReelRequest,
    user_id: str = Depends(current_user_id),
    service: ReelService = Depends(get_reel_service),
):
    try:
        reel = await service.update_reel(
            user_id,
            reel_id,
            title=request.title,
            description=request.description,
            private=request.private,
            delivery_date=request.delivery_date,
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reel not found")
    except NotUpdatedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DatabaseError as e:
        raise _storage_failure("update reel", e)

    return ReelResponse.from_domain(reel)


@router.delete("/{reel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reel(
    reel_id: str,
    user_id: str = Depends(current_user_id),
    service: ReelService = Depends(get_reel_service),
):
    try:
        await service.delete_reel(user_id, reel_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reel not found")
    except NotDeletedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DatabaseError as e:
        raise _storage_failure("delete reel", e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{reel_id}/recipients", response_model=ReelResponse)
async def add_recipients(
    reel_id: str,
    request: AddRecipientsRequest,
    user_id: str = Depends(current_user_id),
    service: ReelService = Depends(get_reel_service),
):
    try:
        reel = await service.add_recipients(user_id, reel_id, request.emails)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reel not found")
    except NotUpdatedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DatabaseError as e:
        raise _storage_failure("add recipients", e)

    return ReelResponse.from_domain(reel)


@router.delete("/{reel_id}/recipients/{recipient_id}", response_model=ReelResponse)
async def delete_recipient(
    reel_id: str,
    recipient_id: str,
    user_id: str = Depends(current_user_id),
    service: ReelService = Depends(get_reel_service),
):
    try:
        reel = await service.delete_recipient(user_id, reel_id, recipient_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except NotDeletedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DatabaseError as e:
        raise _storage_failure("delete recipient", e)

    return ReelResponse.from_domain(reel)
