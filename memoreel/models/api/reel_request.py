from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class CreateReelRequest(BaseModel):
    """Request body for POST /reels."""

    video_id: str = Field(..., min_length=1)
    email: EmailStr = Field(..., description="Sender's email")
    title: str = Field(default="", max_length=200)
    description: str = Field(default="", max_length=2000)
    private: bool = True
    delivery_date: datetime | None = None
    recipients: list[EmailStr] = Field(default_factory=list, description="Recipient emails")


class UpdateReelRequest(BaseModel):
    """Request body for PUT /reels/{reel_id}. Omitted fields are left unchanged."""

    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    private: bool | None = None
    delivery_date: datetime | None = None


class ConfirmReelRequest(BaseModel):
    token: str = Field(..., min_length=1)


class AddRecipientsRequest(BaseModel):
    emails: list[EmailStr] = Field(..., min_length=1, max_length=100)
