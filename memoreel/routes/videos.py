from fastapi import APIRouter, Depends, HTTPException, status

from memoreel.db.helpers import DatabaseError
from memoreel.dependencies import get_video_service
from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.api.video_request import CreateVideoRequest
from memoreel.models.api.video_response import VideoResponse
from memoreel.services.video_service import VideoService

router = APIRouter(prefix="/api/v1/videos", tags=["videos"])
logger = get_logger(__name__)


@router.post("", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def create_video(
    request: CreateVideoRequest, service: VideoService = Depends(get_video_service)
):
    """Register a video that has been uploaded to object storage."""
    try:
        video = await service.register_video(
            key=request.key, file_format=request.file_format, size_mb=request.size_mb
        )
    except DatabaseError as e:
        logger.error("Error registering video", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to register video"
        )

    return VideoResponse.from_domain(video)
