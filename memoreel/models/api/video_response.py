from datetime import datetime

from pydantic import BaseModel

from memoreel.models.domain.video_domain import Video


class VideoResponse(BaseModel):
    id: str
    file_format: str
    size_mb: float
    created_at: datetime | None

    @classmethod
    def from_domain(cls, video: Video) -> "VideoResponse":
        return cls(
            id=video.id,
            file_format=video.file_format,
            size_mb=video.size_mb,
            created_at=video.created_at,
        )
