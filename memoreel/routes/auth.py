from fastapi import APIRouter, Depends, HTTPException, status

from memoreel.db.helpers import DatabaseError
from memoreel.dependencies import get_user_service
from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.api.user_request import VerifyEmailRequest
from memoreel.models.api.user_response import VerifyEmailResponse
from memoreel.models.domain.errors import NotFoundError, NotUpdatedError
from memoreel.services.user_service import EmailVerificationExpiredError, UserService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])
logger = get_logger(__name__)


@router.post("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(
    request: VerifyEmailRequest, service: UserService = Depends(get_user_service)
):
    """Verify an email address and claim the reels previously sent from it."""
    try:
        user, claimed = await service.verify_email(request.token)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid token")
    except EmailVerificationExpiredError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotUpdatedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DatabaseError as e:
        logger.error("Error verifying email", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to verify email"
        )

    return VerifyEmailResponse(success=True, user_id=user.id, reels_claimed=claimed)
