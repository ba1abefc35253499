from datetime import datetime

from pydantic import BaseModel


class Video(BaseModel):
    """Metadata for an uploaded video; the file itself lives in object storage under `key`."""

    id: str
    key: str
    file_format: str
    size_mb: float
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
