from datetime import datetime

from pydantic import BaseModel, Field

from memoreel.models.domain.reel_domain import Reel, ReelDeliveryStatus


class RecipientResponse(BaseModel):
    uid: str
    email: str
    created_at: datetime


class ReelResponse(BaseModel):
    """A reel as shown to its owner. The confirmation token is never exposed."""

    id: str
    user_id: str | None
    video_id: str
    email: str
    title: str
    description: str
    private: bool
    recipients: list[RecipientResponse]
    delivery_status: ReelDeliveryStatus
    delivery_date: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_domain(cls, reel: Reel) -> "ReelResponse":
        return cls(
            id=reel.id,
            user_id=reel.user_id,
            video_id=reel.video_id,
            email=reel.email,
            title=reel.title,
            description=reel.description,
            private=reel.private,
            recipients=[
                RecipientResponse(uid=r.uid, email=r.email, created_at=r.created_at)
                for r in reel.recipients
            ],
            delivery_status=reel.delivery_status,
            delivery_date=reel.delivery_date,
            created_at=reel.created_at,
            updated_at=reel.updated_at,
        )


class PaginationResponse(BaseModel):
    per_page: int
    cursor: str
    has_more_pages: bool


class ReelListResponse(BaseModel):
    """Response for GET /reels"""

    items: list[ReelResponse]
    pagination: PaginationResponse = Field(..., description="Cursor for the next page")


class ConfirmReelResponse(BaseModel):
    success: bool
    reel_id: str
    delivery_status: ReelDeliveryStatus
