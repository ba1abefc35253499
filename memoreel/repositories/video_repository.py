"""
PostgreSQL persistence for video metadata.
"""

from memoreel.db.helpers import execute_query, fetch_one
from memoreel.db.pool import DatabasePoolManager
from memoreel.infrastructure.observability.logging import get_logger
from memoreel.models.domain.errors import (
    VideoNotDeletedError,
    VideoNotFoundError,
    VideoNotUpdatedError,
)
from memoreel.models.domain.video_domain import Video
from memoreel.utils.model_helpers import refresh_model

logger = get_logger(__name__)


class PostgresVideoRepository:
    """VideoRepository backed by the videos table."""

    VIDEO_COLUMNS = "id, key, file_format, size_mb, created_at, updated_at, deleted_at"

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    async def get_video_by_id(self, video_id: str) -> Video:
        query = f"""
            SELECT {self.VIDEO_COLUMNS}
            FROM videos
            WHERE id = %s AND deleted_at IS NULL
        """
        row = await fetch_one(self.db, query, (video_id,))
        if not row:
            raise VideoNotFoundError(video_id=video_id)

        return Video.model_validate(row)

    async def create_video(self, video: Video) -> Video:
        query = f"""
            INSERT INTO videos (id, key, file_format, size_mb)
            VALUES (%s, %s, %s, %s)
            RETURNING {self.VIDEO_COLUMNS}
        """
        row = await fetch_one(
            self.db, query, (video.id, video.key, video.file_format, video.size_mb)
        )

        logger.info("Video created", video_id=video.id, file_format=video.file_format)
        return refresh_model(video, Video.model_validate(row))

    async def update_video(self, video: Video) -> None:
        query = """
            UPDATE videos SET
                key = %s,
                file_format = %s,
                size_mb = %s,
                updated_at = NOW()
            WHERE id = %s AND deleted_at IS NULL
        """
        affected_rows = await execute_query(
            self.db, query, (video.key, video.file_format, video.size_mb, video.id)
        )
        if affected_rows < 1:
            raise VideoNotUpdatedError(video_id=video.id)

    async def delete_video(self, video_id: str) -> None:
        query = """
            UPDATE videos SET deleted_at = NOW()
            WHERE id = %s AND deleted_at IS NULL
        """
        affected_rows = await execute_query(self.db, query, (video_id,))
        if affected_rows < 1:
            raise VideoNotDeletedError(video_id=video_id)
