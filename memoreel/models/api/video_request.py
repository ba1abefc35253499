from pydantic import BaseModel, Field


class CreateVideoRequest(BaseModel):
    """Request body for POST /videos, sent after the file reached object storage."""

    key: str = Field(..., min_length=1, description="Object storage key")
    file_format: str = Field(..., min_length=1, max_length=16)
    size_mb: float = Field(..., gt=0)
