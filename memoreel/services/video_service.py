from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.domain.video_domain import Video
from memoreel.repositories.interfaces import VideoRepository
from memoreel.utils.ids import new_id

logger = get_logger(__name__)


class VideoService:
    """Registers uploaded videos; the upload itself happens against object storage."""

    def __init__(self, videos: VideoRepository):
        self.videos = videos

    async def register_video(self, *, key: str, file_format: str, size_mb: float) -> Video:
        video = Video(id=new_id(), key=key, file_format=file_format.lower(), size_mb=size_mb)
        video = await self.videos.create_video(video)

        logger.info("Video registered", video_id=video.id, size_mb=size_mb)
        return video
